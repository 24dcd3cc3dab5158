"""Enemy pawns: the flying stalker and the bouncing boss that splits on death."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from ericsjourney.entities import Actor, Faction, ObjectType, Pawn, Rect, Vec2
from ericsjourney.particles import Animation, IntRect

STALKER_TEXTURE = "./resources/Volador.png"
BOSS_TEXTURE = "./resources/enemies/BouncingBoss.png"
BOSS_DAMAGE_TYPE = "BOUNCING_BOSS"


class World(Protocol):
    """What enemies need from the world they live in."""

    def player_character(self) -> Pawn | None: ...

    def spawn_actor(self, actor: Actor) -> None: ...

    def box_trace(self, rect: Rect, object_type: ObjectType) -> Actor | None: ...


class Enemy(Pawn):
    """A hostile pawn that the player can lock on to."""

    def __init__(
        self,
        location: Vec2 | None = None,
        width: float = 0.0,
        height: float = 0.0,
        health_max: float = 100.0,
        movement_speed: float = 0.0,
        texture_file: str = "",
        world: World | None = None,
    ) -> None:
        super().__init__(
            location=location,
            width=width,
            height=height,
            faction=Faction.ENEMY,
            health_max=health_max,
            movement_speed=movement_speed,
            texture_file=texture_file,
        )
        self.world = world
        self.targeted = False
        self.animations: dict[str, Animation] = {}
        self.active_animation: Animation | None = None

    def toggle_target(self, targeted: bool) -> None:
        """Show or hide the marker telling that the player aims at this enemy."""
        self.targeted = targeted

    def direction_precheck(self, location: Vec2, object_type: ObjectType) -> Actor | None:
        """Actor of the given type that the bounding box would hit at ``location``."""
        if self.world is None:
            return None
        return self.world.box_trace(Rect.from_center(location, self.width, self.height), object_type)


def _grid(width: int, height: int, cells: list[tuple[int, int]]) -> list[IntRect]:
    return [IntRect(left, top, width, height) for left, top in cells]


_STALKER_W, _STALKER_H = 401, 249
_STALKER_CELLS = [(0, 0), (401, 0), (0, 249), (401, 249), (0, 498), (401, 498)]


class Stalker(Enemy):
    """A slow flyer that always heads straight for the player."""

    def __init__(self, world: World | None = None) -> None:
        scale = 0.15
        super().__init__(
            location=Vec2(340.0, 520.0),
            width=_STALKER_W * scale,
            height=_STALKER_H * scale,
            health_max=100.0,
            movement_speed=0.05,
            texture_file=STALKER_TEXTURE,
            world=world,
        )
        self.damage_base = 15.0
        self.damage_multiplier = 0.0
        self.animations = self._build_animations()

    @staticmethod
    def _build_animations() -> dict[str, Animation]:
        animations: dict[str, Animation] = {}
        plain = _grid(_STALKER_W, _STALKER_H, _STALKER_CELLS)
        # Facing right mirrors the sheet horizontally with a negative width.
        mirrored = [IntRect(r.left + _STALKER_W, r.top, -_STALKER_W, _STALKER_H) for r in plain]
        for name, frames in (("up", plain), ("right", mirrored), ("left", plain), ("down", plain)):
            animations[name] = Animation(1500, looping=True, frames=list(frames))
        animations["dead"] = Animation(
            1500, looping=True, frames=[IntRect(0, 747, _STALKER_W, _STALKER_H)]
        )
        return animations

    def follow_player(self) -> None:
        """Point the stalker straight at the player."""
        if self.world is None:
            return
        player = self.world.player_character()
        if player is None:
            return
        offset = player.location - self.location
        self.direction = offset.normalized() if offset else Vec2()

    def update(self, delta: float) -> None:
        super().update(delta)
        self.follow_player()

    def die(self) -> None:
        self.active_animation = self.animations["dead"]
        self.set_lifespan(1.5)


_BOSS_W, _BOSS_H = 540, 459


class BouncingBoss(Enemy):
    """A boss that bounces off walls and splits into two smaller copies when killed."""

    time_dmg_animation = 500
    time_between_attacks = 2500

    def __init__(
        self,
        direction: Vec2 = Vec2(0.5, 0.5),
        children: int = 4,
        scale: float = 1.0,
        max_health: float = 100.0,
        world: World | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        factor = 0.20 * scale * 0.8
        super().__init__(
            location=Vec2(100.0, 100.0),
            width=_BOSS_W * factor,
            height=_BOSS_H * factor,
            health_max=max_health,
            movement_speed=0.35,
            texture_file=BOSS_TEXTURE,
            world=world,
        )
        self.children = children
        self.sprite_scale = scale
        self.set_direction(direction)
        self.health_current = self.health_max
        self.damage_base = 15.0
        self.damage_multiplier = 0.0
        self.dmg_cooldown_end: float | None = None
        self.dmg_animation_end: float | None = None
        self.clock = clock if clock is not None else (lambda: time.monotonic() * 1000.0)
        self.animations = {
            "MOVING": Animation(
                3000, looping=True, frames=_grid(_BOSS_W, _BOSS_H, [(0, 0), (0, 459)])
            ),
            "HIT": Animation(750, looping=True, frames=_grid(_BOSS_W, _BOSS_H, [(0, 918)])),
        }
        self.active_animation = self.animations["MOVING"]

    def _bounce_off(self, collide: Actor) -> None:
        d = self.direction
        dx = abs(collide.location.x - self.location.x)
        dy = abs(collide.location.y - self.location.y)
        if abs(d.x) < abs(d.y):
            new = Vec2(d.x, -d.y) if dx < dy else Vec2(-d.x, -d.y)
        else:
            new = Vec2(-d.x, d.y) if dx > dy else Vec2(d.x, -d.y)
        self.set_direction(new)
        if collide.object_type is ObjectType.DOOR:
            # Stuck against the door: force a vertical turn-around.
            last = self.last_direction
            self.set_direction(Vec2(last.x, -last.y))

    def update(self, delta: float) -> None:
        """Move, bouncing off static world geometry; skips the regular pawn movement."""
        alive = self.is_alive()
        if self.direction and alive:
            target = self.location + self.direction * (self.movement_speed * delta)
            collide = self.direction_precheck(target, ObjectType.WORLD_STATIC)
            if collide is None:
                self.move_to(target)
            else:
                self._bounce_off(collide)
                self.location = self.last_location
        elif not self.direction and alive:
            self.set_direction(-self.last_direction)
        Actor.update(self, delta)

    def refresh_status(self, now: float) -> str:
        """Expire timers at ``now`` (ms) and pick the animation; returns its name."""
        if self.dmg_animation_end is not None and now >= self.dmg_animation_end:
            self.dmg_animation_end = None
        if self.dmg_cooldown_end is not None and now >= self.dmg_cooldown_end:
            self.dmg_cooldown_end = None
        name = "MOVING" if self.dmg_animation_end is None else "HIT"
        self.active_animation = self.animations[name]
        return name

    def take_damage(self, damage: float, causer: Actor | None, damage_type: str) -> None:
        self.dmg_animation_end = self.clock() + self.time_between_attacks
        super().take_damage(damage, causer, damage_type)

    def on_actor_overlap(self, other: Actor) -> None:
        if (
            self.dmg_cooldown_end is None
            and isinstance(other, Pawn)
            and other.faction == Faction.ALLIE
        ):
            other.take_damage(self.damage_base, self, BOSS_DAMAGE_TYPE)
            self.dmg_cooldown_end = self.clock() + self.time_dmg_animation

    def die(self) -> None:
        """Split into two smaller bosses heading away from each other."""
        if self.children > 0 and self.world is not None:
            d = self.direction
            for direction in (Vec2(-d.x, d.y), Vec2(d.x, -d.y)):
                child = BouncingBoss(
                    direction,
                    self.children - 1,
                    self.sprite_scale * 0.8,
                    200.0,
                    world=self.world,
                    clock=self.clock,
                )
                child.location = self.location
                child.last_location = self.location
                self.world.spawn_actor(child)
        self.set_lifespan(0.1)