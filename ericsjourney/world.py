"""The game world: level flow, actor bookkeeping, collisions and scoring."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ericsjourney.controller import PlayerController
from ericsjourney.enemies import Enemy
from ericsjourney.entities import Actor, ObjectType, Rect, Tile, Vec2
from ericsjourney.particles import Effect, Emitter
from ericsjourney.player import Player
from ericsjourney.projectiles import Projectile

UPDATE_INTERVAL = 1000 / 25.0
TOTAL_LEVELS = 12
LEVEL_SCORE = 2000.0
SCORE_TIME_SCALE = 6000.0
PLAYER_START = Vec2(350.0, 850.0)
EXIT_LINE_Y = 100.0

_LEVEL_GEOMETRY = (
    ObjectType.WORLD_STATIC,
    ObjectType.DOOR,
    ObjectType.WORLD_DYNAMIC,
    ObjectType.POWERUP,
)


@runtime_checkable
class Openable(Protocol):
    """A door that opens once the level is cleared."""

    upper: bool
    opened: bool

    def open_door(self) -> None: ...


@dataclass(frozen=True)
class GameResult:
    """Final score shown when a game ends."""

    points: float
    won: bool


class Game:
    """Owns every actor in the world and drives the level progression."""

    def __init__(
        self,
        level_loader: Callable[[str], Iterable[Actor]] | None = None,
        max_levels: int = TOTAL_LEVELS,
        sound: Callable[[str], None] | None = None,
    ) -> None:
        self.level_loader = level_loader
        self.max_levels = max_levels
        self.sound = sound
        self.actors: list[Actor] = []
        self.emitters: list[Emitter] = []
        self.player: Player | None = None
        self.controller: PlayerController | None = None
        self.playing = False
        self.current_level = 0
        self.points = 0.0
        self.clock = 0.0
        self.level_started_at: float | None = None
        self.map_name: str | None = None
        self.result: GameResult | None = None

    def _new_player(self) -> None:
        self.current_level = 0
        self.points = 0.0
        self.level_started_at = None
        self.result = None
        self.playing = True
        self.player = Player(world=self, sound=self.sound)
        self.init_level()
        self.controller = PlayerController(self.player, now=self.clock)

    def start_game(self) -> None:
        """Begin a new game from the first level."""
        self._new_player()

    def restart_game(self) -> None:
        """Drop the current controller and start over with a fresh player."""
        self.controller = None
        self._new_player()

    def _level_score(self) -> float:
        started = self.level_started_at if self.level_started_at is not None else self.clock
        share = 1 - (self.clock - started) / SCORE_TIME_SCALE
        return share * LEVEL_SCORE

    def init_level(self) -> None:
        """Clear the previous level's geometry, score it, and load the next one."""
        for actor in self.actors:
            if actor.object_type in _LEVEL_GEOMETRY:
                actor.set_lifespan(0.0)

        if self.playing and self.level_started_at is not None:
            self.points += self._level_score()

        if self.current_level >= self.max_levels:
            self.end_game()
            return

        self.map_name = f"Mapa{self.current_level + 1}.tmx"
        if self.level_loader is not None:
            self.actors.extend(self.level_loader(self.map_name))
        if self.player is not None:
            # The player is drawn last so it stays on top of everything.
            if self.player in self.actors:
                self.actors.remove(self.player)
            self.actors.append(self.player)
            self.player.location = PLAYER_START
            self.player.last_location = PLAYER_START
        self.level_started_at = self.clock

    def spawn_actor(self, actor: Actor) -> None:
        self.actors.append(actor)

    def enemies(self) -> list[Enemy]:
        return [actor for actor in self.actors if isinstance(actor, Enemy)]

    def projectiles(self) -> list[Projectile]:
        return [actor for actor in self.actors if isinstance(actor, Projectile)]

    def _powerups(self) -> list[Actor]:
        return [actor for actor in self.actors if actor.object_type is ObjectType.POWERUP]

    def player_character(self) -> Player | None:
        return next((actor for actor in self.actors if isinstance(actor, Player)), None)

    def kill_all_enemies(self) -> None:
        for enemy in self.enemies():
            enemy.set_lifespan(0.0)

    def box_trace(self, rect: Rect, object_type: ObjectType) -> Actor | None:
        """First actor of the given type whose box overlaps ``rect``."""
        return next(
            (
                actor
                for actor in self.actors
                if actor.object_type is object_type and actor.bounding_box().intersects(rect)
            ),
            None,
        )

    def box_trace_ignoring(
        self, rect: Rect, object_type: ObjectType, ignore: Iterable[Actor], axis: int = 0
    ) -> Actor | None:
        """Like ``box_trace`` but skipping ignored actors.

        With ``axis`` 0 an actor sharing an ignored actor's x is skipped for it,
        with 1 its y; any other value compares no axis.
        """
        ignored = list(ignore)
        if not ignored:
            return self.box_trace(rect, object_type)
        for actor in self.actors:
            for other in ignored:
                if actor is other:
                    continue
                if axis == 0 and actor.location.x == other.location.x:
                    continue
                if axis == 1 and actor.location.y == other.location.y:
                    continue
                if actor.object_type is object_type and actor.bounding_box().intersects(rect):
                    return actor
        return None

    def check_victory(self) -> None:
        """End the game on death, or open the exit and advance once the level is clear."""
        player = self.player
        if player is None:
            return
        if not player.is_alive():
            self.points += self._level_score()
            self.end_game()
            return
        if self.enemies():
            return

        powerups = self._powerups()
        for powerup in powerups:
            if not getattr(powerup, "used", False):
                powerup.activated = True
        if powerups:
            return

        for actor in self.actors:
            if isinstance(actor, Openable) and actor.upper and not actor.opened:
                actor.open_door()
            if isinstance(actor, Tile) and actor.is_door:
                actor.set_lifespan(0.0)

        if player.location.y < EXIT_LINE_Y:
            self.current_level += 1
            self.init_level()

    def end_game(self) -> GameResult:
        """Stop playing, record the final score and remove every actor."""
        self.playing = False
        won = self.player is not None and self.player.is_alive()
        self.result = GameResult(self.points, won)
        if self.controller is not None:
            self.controller.upgrades.clear()
        for actor in self.actors:
            actor.set_lifespan(0.0)
        return self.result

    def spawn_emitter(self, effect: Effect | int, location: Vec2) -> Emitter | None:
        """Place a particle effect in the world; unknown effects are ignored."""
        try:
            emitter = Emitter(effect, location)
        except ValueError:
            return None
        self.emitters.append(emitter)
        return emitter

    def step(self, delta: float) -> None:
        """Run one update tick of ``delta`` milliseconds."""
        self.clock += delta / 1000.0

        for emitter in self.emitters:
            emitter.update(delta)
        self.emitters = [emitter for emitter in self.emitters if not emitter.is_pending_delete()]

        if self.playing:
            snapshot = list(self.actors)
            for actor in snapshot:
                box = actor.bounding_box()
                for other in snapshot:
                    if other is not actor and box.intersects(other.bounding_box()):
                        other.on_actor_overlap(actor)
                if not actor.asleep:
                    actor.update(delta)
            self.check_victory()

        removed = [actor for actor in self.actors if actor.pending_delete]
        self.actors = [actor for actor in self.actors if not actor.pending_delete]
        player = self.player
        if player is not None and player.target is not None:
            if any(actor is player.target for actor in removed):
                player.set_target(None)