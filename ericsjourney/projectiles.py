"""Projectiles: arrows, bouncing arrows, fireballs, rocks and almonds."""

from __future__ import annotations

import math
import random
from typing import Callable, ClassVar, Protocol

from ericsjourney.entities import Actor, Faction, ObjectType, Pawn, Rect, Tile, Vec2
from ericsjourney.particles import Animation, Effect, IntRect

HIT_SOUND = "./resources/audio/hit.ogg"


class World(Protocol):
    """What a projectile needs from the world it flies through."""

    def spawn_emitter(self, effect: Effect, location: Vec2) -> object: ...

    def box_trace(self, rect: Rect, object_type: ObjectType) -> Actor | None: ...


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def rotation_degrees(direction: Vec2) -> float:
    """Sprite rotation for a direction; the sprite art points towards negative x."""
    return math.degrees(math.atan2(-direction.y, -direction.x))


class Projectile(Actor):
    """A moving actor that damages pawns of its target faction on contact."""

    texture: ClassVar[str] = "./resources/sprites.png"
    speed: ClassVar[float] = 0.2
    base_damage: ClassVar[float] = 20.0
    default_target: ClassVar[Faction] = Faction.ALLIE
    texture_size: ClassVar[tuple[float, float]] = (0.0, 0.0)
    sprite_scale: ClassVar[tuple[float, float]] = (1.0, 1.0)
    animation_duration: ClassVar[float] = 0.0
    animation_frames: ClassVar[tuple[IntRect, ...]] = ()
    moves: ClassVar[bool] = False

    def __init__(
        self,
        direction: Vec2 | None = None,
        location: Vec2 | None = None,
        *,
        world: World | None = None,
        sound: Callable[[str], None] | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        width = self.texture_size[0] * self.sprite_scale[0]
        height = self.texture_size[1] * self.sprite_scale[1]
        super().__init__(location, width, height, ObjectType.PROJECTILE, self.texture)
        self.direction = direction if direction is not None else Vec2(1.0, 1.0)
        self.movement_speed = self.speed
        self.damage = self.base_damage
        self.target_faction = self.default_target
        self.name = "PROJECTILE_BASE"
        self.damage_applied = False
        self.rotation = 0.0
        self.world = world
        self.sound = sound
        self.rng: RandomSource = rng if rng is not None else random
        self.animation: Animation | None = None
        if self.animation_frames:
            self.animation = Animation(self.animation_duration, looping=True)
            for frame in self.animation_frames:
                self.animation.add_frame(frame)

    def set_direction(self, direction: Vec2) -> Vec2:
        self.direction = direction
        return direction

    def _play(self, path: str) -> None:
        if self.sound is not None:
            self.sound(path)

    def _spawn(self, effect: Effect) -> None:
        if self.world is not None:
            self.world.spawn_emitter(effect, self.location)

    def _next_location(self, delta: float) -> Vec2:
        return self.location + self.direction * (self.movement_speed * delta)

    def _is_target(self, other: Actor) -> bool:
        return isinstance(other, Pawn) and other.faction == self.target_faction

    def _jittered_damage(self) -> float:
        return self.damage + self.rng.randrange(20) - 10

    def update(self, delta: float) -> None:
        """Fly ``delta`` milliseconds along the current direction."""
        if self.moves:
            self.move_to(self._next_location(delta))
            self.rotation = rotation_degrees(self.direction)
        if self.animation is not None:
            self.animation.update(delta)
        super().update(delta)

    def on_actor_overlap(self, other: Actor) -> None:
        if not self.damage_applied and self._is_target(other):
            other.take_damage(self.damage, self, self.name)
            self.damage_applied = True
            self.destroy()
            self.set_lifespan(0.0)
        elif isinstance(other, Tile):
            self.damage_applied = True
            self.destroy()
            self.set_lifespan(0.0)

    def modify_damage(self, factor: float) -> None:
        self.damage *= factor

    def destroy(self) -> None:
        """Hook run when the projectile is destroyed on impact."""


_ARROW_FRAMES = (IntRect(0, 0, 830, 74),)


class Arrow(Projectile):
    """The player's arrow: random damage spread, shatters against walls."""

    texture = "./resources/projectiles/arrow.png"
    speed = 0.95
    default_target = Faction.ENEMY
    texture_size = (830.0, 74.0)
    sprite_scale = (0.16, 0.17)
    animation_duration = 1500
    animation_frames = _ARROW_FRAMES
    moves = True

    def on_actor_overlap(self, other: Actor) -> None:
        if not self.damage_applied and self._is_target(other):
            other.take_damage(self._jittered_damage(), self, self.name)
            self.damage_applied = True
            self._play(HIT_SOUND)
            self.destroy()
            self.set_lifespan(0.0)
        elif isinstance(other, Tile):
            self._spawn(Effect.ROCK_EXPLOSION)
            self._play(HIT_SOUND)
            self.destroy()
            self.set_lifespan(0.0)
        super().on_actor_overlap(other)


class BouncingArrow(Projectile):
    """An arrow that bounces off walls and pierces through enemies."""

    texture = "./resources/projectiles/arrow.png"
    speed = 0.95
    default_target = Faction.ENEMY
    texture_size = (830.0, 74.0)
    sprite_scale = (0.16, 0.17)
    animation_duration = 1500
    animation_frames = _ARROW_FRAMES
    moves = True
    lifeguard_seconds: ClassVar[float] = 8.0

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.max_bounce_count = 2
        self.bounce_count = 0
        self.last_damaged: Actor | None = None
        self.last_trace: Rect | None = None

    def direction_precheck(self, location: Vec2, object_type: ObjectType) -> Actor | None:
        """Find an actor of the given type in a slightly shrunk box at ``location``."""
        box = self.bounding_box()
        trace = Rect(
            location.x - box.width / 2 + 5,
            location.y - box.height / 2 + 5,
            box.width - 10,
            box.height - 10,
        )
        self.last_trace = trace
        if self.world is None:
            return None
        return self.world.box_trace(trace, object_type)

    def _bounce_off(self, collide: Actor) -> None:
        dx = abs(collide.location.x - self.location.x)
        dy = abs(collide.location.y - self.location.y)
        d = self.direction
        if abs(d.x) < abs(d.y):
            flip_y = dx < dy
        else:
            flip_y = not dx > dy
        self.set_direction(Vec2(d.x, -d.y) if flip_y else Vec2(-d.x, d.y))

    def update(self, delta: float) -> None:
        target = self._next_location(delta)
        collide = self.direction_precheck(target, ObjectType.WORLD_STATIC)
        if collide is not None:
            # The new direction takes effect on the next step, so this step keeps
            # moving into the wall instead of jumping away from it.
            self._bounce_off(collide)
            self.bounce_count += 1
            if self.bounce_count >= self.max_bounce_count:
                self._spawn(Effect.SPLINTERS)
                self.set_lifespan(0.0)
        self.move_to(target)
        self.rotation = rotation_degrees(self.direction)
        if self.animation is not None:
            self.animation.update(delta)
        Actor.update(self, delta)
        # Safety net for arrows that slip out of the map through a missed collision.
        self.set_lifespan(self.lifeguard_seconds)

    def on_actor_overlap(self, other: Actor) -> None:
        if self.last_damaged is not None:
            if other is not self.last_damaged and not self.damage_applied and self._is_target(other):
                other.take_damage(self._jittered_damage(), self, self.name)
                self.last_damaged = other
        elif self._is_target(other):
            other.take_damage(self._jittered_damage(), self, self.name)
            self.last_damaged = other


class FireBall(Projectile):
    """An enemy fireball that explodes against walls."""

    texture = "./resources/projectiles/fireball-short.png"
    speed = 0.23
    texture_size = (220.0, 124.0)
    sprite_scale = (0.35, 0.35)
    animation_duration = 1100
    animation_frames = (
        IntRect(0, 0, 220, 124),
        IntRect(220, 0, 220, 124),
        IntRect(0, 124, 220, 124),
        IntRect(220, 124, 220, 124),
        IntRect(0, 248, 220, 124),
    )
    moves = True

    def on_actor_overlap(self, other: Actor) -> None:
        if isinstance(other, Tile):
            self._spawn(Effect.EXPLOSION)
            self._play(HIT_SOUND)
        super().on_actor_overlap(other)


class Rock(Projectile):
    """An enemy rock that bursts into debris when destroyed."""

    texture = "./resources/projectiles/rock.png"
    speed = 0.28
    texture_size = (400.0, 400.0)
    sprite_scale = (0.1, 0.1)
    animation_duration = 1600
    animation_frames = (
        IntRect(0, 0, 400, 400),
        IntRect(0, 400, 394, 394),
        IntRect(0, 794, 394, 394),
        IntRect(0, 1188, 394, 394),
    )
    moves = True

    def destroy(self) -> None:
        self._spawn(Effect.ROCK_EXPLOSION)


class Almendra(Projectile):
    """An enemy almond that splinters against walls."""

    texture = "./resources/projectiles/almendra.png"
    speed = 0.4
    texture_size = (228.0, 118.0)
    sprite_scale = (0.35, 0.35)
    animation_duration = 4100
    animation_frames = (
        IntRect(0, 0, 228, 118),
        IntRect(228, 0, 228, 118),
        IntRect(0, 118, 228, 118),
        IntRect(228, 118, 228, 118),
        IntRect(0, 236, 228, 118),
        IntRect(228, 236, 228, 118),
    )
    moves = True

    def on_actor_overlap(self, other: Actor) -> None:
        if isinstance(other, Tile):
            self._spawn(Effect.SPLINTERS)
            self._play(HIT_SOUND)
        super().on_actor_overlap(other)