"""The player character: movement animations, targeting, shooting and upgrades."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Protocol

from ericsjourney.entities import Actor, Faction, Pawn, Vec2
from ericsjourney.particles import Animation, Effect, IntRect
from ericsjourney.projectiles import Arrow, BouncingArrow, Projectile

PLAYER_TEXTURE = "./resources/player.png"
HIT_SOUND = "./resources/audio/hit.ogg"
SHOOT_SOUND = "./resources/audio/player_shoot.ogg"
SHOOT_SOUND_REPEAT = "./resources/audio/player_shoot2.ogg"

FRAME_SIZE = 550
SPRITE_SCALE = 0.14
BOUNDS_FACTOR = 0.80
WALK_DURATION = 6500
STOP_DURATION = 500

MIN_ATTACK_INTERVAL = 0.86
BASE_ATTACK_INTERVAL = 1.8
DAMAGE_UPGRADE_FACTOR = 1.2
SECOND_ARROW_OFFSET = Vec2(-30.0, -30.0)

_SHEET_ORIGINS = {
    "down": (0, 0),
    "right": (0, 2750),
    "left": (1650, 0),
    "up": (1650, 2750),
}


class Facing(Enum):
    """The four directions the player sprite can face."""

    RIGHT = 1
    UP = 2
    LEFT = 3
    DOWN = 4


class Target(Protocol):
    """What the player needs from an enemy it can aim at."""

    location: Vec2

    def is_alive(self) -> bool: ...

    def toggle_target(self, targeted: bool) -> None: ...


class World(Protocol):
    """What the player needs from the world it lives in."""

    def enemies(self) -> Iterable[Target]: ...

    def projectiles(self) -> Iterable[Projectile]: ...

    def spawn_actor(self, actor: Actor) -> None: ...

    def spawn_emitter(self, effect: Effect, location: Vec2) -> object: ...


def facing_for_angle(degrees: float) -> Facing:
    """Facing for a screen angle in degrees, counter-clockwise from the positive x axis."""
    angle = degrees % 360.0
    if angle < 67.5:
        return Facing.RIGHT
    if angle < 112.5:
        return Facing.UP
    if angle < 247.5:
        return Facing.LEFT
    if angle < 292.5:
        return Facing.DOWN
    return Facing.RIGHT


def _screen_angle(vector: Vec2) -> float:
    # Screen y grows downwards, so flip it to get a conventional angle.
    angle = math.degrees(math.atan2(-vector.y, vector.x))
    if angle < 0:
        angle += 360.0
    return angle


def animation_for_direction(direction: Vec2, pause_facing: Facing | None) -> str:
    """Name of the animation to play while moving in ``direction``.

    An angle of exactly zero (standing still, or heading straight right) shows
    the standing animation facing ``pause_facing``, or up when there is none.
    """
    angle = _screen_angle(direction)
    if angle == 0:
        facing = pause_facing if pause_facing is not None else Facing.UP
        return "stop" + facing.name.lower()
    return facing_for_angle(angle).name.lower()


def _build_animations() -> dict[str, Animation]:
    animations: dict[str, Animation] = {}
    for name, (base_x, base_y) in _SHEET_ORIGINS.items():
        walk = Animation(WALK_DURATION, looping=True)
        for row in range(5):
            for column in range(3):
                walk.add_frame(
                    IntRect(
                        base_x + FRAME_SIZE * column,
                        base_y + FRAME_SIZE * row,
                        FRAME_SIZE,
                        FRAME_SIZE,
                    )
                )
        animations[name] = walk
        stop = Animation(STOP_DURATION, looping=True)
        stop.add_frame(IntRect(base_x, base_y, FRAME_SIZE, FRAME_SIZE))
        animations["stop" + name] = stop
    return animations


class Player(Pawn):
    """The hero: walks where told, auto-aims at the nearest enemy and shoots when still."""

    def __init__(
        self,
        world: World | None = None,
        sound: Callable[[str], None] | None = None,
    ) -> None:
        size = FRAME_SIZE * SPRITE_SCALE * BOUNDS_FACTOR
        super().__init__(
            location=Vec2(100.0, 100.0),
            width=size,
            height=size,
            faction=Faction.ALLIE,
            health_max=100.0,
            movement_speed=0.25,
            texture_file=PLAYER_TEXTURE,
        )
        self.world = world
        self.sound = sound
        self.damage_base = 15.0
        self.damage_multiplier = 0.0
        self.attack_improvement = 0
        self.increase_damage = 0
        self.last_attack = 0
        self.critic = 1.0
        self.cadence_multiplier = 1.0
        self.god_mode = False
        self.target: Target | None = None
        self.aim = Vec2()
        self.attack_clock = 0.0
        self.animations = _build_animations()
        self.active_animation: Animation | None = None

    def _play(self, path: str) -> None:
        if self.sound is not None:
            self.sound(path)

    def pause_facing(self) -> Facing | None:
        """Direction towards the current target, or None without one."""
        if self.target is None:
            return None
        return facing_for_angle(_screen_angle(self.target.location - self.location))

    def current_animation(self) -> Animation:
        """Select and return the animation matching the current movement."""
        name = animation_for_direction(self.direction, self.pause_facing())
        self.active_animation = self.animations[name]
        return self.active_animation

    def update(self, delta: float) -> None:
        """Move, retarget, and shoot when standing still long enough."""
        self.attack_clock += delta / 1000.0
        super().update(delta)
        self.set_target(self.find_closest_enemy())
        if (
            self.attack_clock >= MIN_ATTACK_INTERVAL
            and self.attack_clock > BASE_ATTACK_INTERVAL * self.cadence_multiplier
            and not self.direction
        ):
            self.attack()
            self.attack_clock = 0.0

    def take_damage(self, damage: float, causer: Actor | None, damage_type: str) -> None:
        if self.health_current <= 0 or self.god_mode:
            return
        self.health_current -= damage
        if not self.is_alive():
            self.die()
            return
        self.apply_hit_effects(damage_type)
        if self.world is not None:
            self.world.spawn_emitter(Effect.HIT, self.location)
        self._play(HIT_SOUND)

    def find_closest_enemy(self) -> Target | None:
        """Nearest living enemy; also remembers the unit vector towards it as ``aim``."""
        if self.world is None:
            return None
        closest: Target | None = None
        min_dist = 0.0
        offset_to_closest = Vec2()
        for enemy in self.world.enemies():
            if not enemy.is_alive():
                continue
            offset = enemy.location - self.location
            dist = offset.length()
            if min_dist == 0.0 or dist < min_dist:
                min_dist = dist
                offset_to_closest = offset
                closest = enemy
        if closest is not None and min_dist > 0.0:
            self.aim = offset_to_closest / min_dist
        return closest

    def set_target(self, enemy: Target | None) -> None:
        """Switch the target, moving the target marker from the old enemy to the new."""
        if self.target is not None:
            self.target.toggle_target(False)
        self.target = enemy
        if self.target is not None:
            self.target.toggle_target(True)

    def _fire(self, kind: type[Projectile], direction: Vec2, location: Vec2) -> Projectile:
        projectile = kind(direction, location, world=self.world, sound=self.sound)
        if self.world is not None:
            self.world.spawn_actor(projectile)
        return projectile

    def attack(self) -> list[Projectile]:
        """Shoot at the current target according to the upgrades; return what was fired."""
        if self.target is None:
            return []
        here = self.location
        beside = here + SECOND_ARROW_OFFSET
        fired = [self._fire(Arrow, self.aim, here)]
        self._play(SHOOT_SOUND if self.last_attack == 0 else SHOOT_SOUND_REPEAT)
        self.last_attack += 1

        if self.attack_improvement >= 1:
            fired.append(self._fire(Arrow, -self.aim, here))
        if self.attack_improvement >= 2:
            fired.append(self._fire(Arrow, self.aim, beside))
        if self.attack_improvement >= 3:
            fired.append(self._fire(Arrow, -self.aim, beside))
        if self.attack_improvement >= 4:
            for direction, location in (
                (self.aim, here),
                (-self.aim, here),
                (self.aim, beside),
                (-self.aim, beside),
            ):
                fired.append(self._fire(BouncingArrow, direction, location))

        for _ in range(self.increase_damage):
            self.modify_damage()
        return fired

    def improve_attack(self) -> None:
        """Add one more level of multi-arrow shooting."""
        self.attack_improvement += 1

    def increase_damage_arrows(self) -> None:
        """Add one more level of arrow damage."""
        self.increase_damage += 1

    def modify_damage(self) -> None:
        """Boost the damage of every arrow currently in the world."""
        if self.world is None:
            return
        for projectile in self.world.projectiles():
            if isinstance(projectile, (Arrow, BouncingArrow)):
                projectile.modify_damage(DAMAGE_UPGRADE_FACTOR)

    def modify_critic(self, factor: float) -> None:
        self.critic *= factor

    def increase_max_health(self, amount: float) -> None:
        self.health_max += amount

    def heal(self, amount: float) -> None:
        self.health_current += amount