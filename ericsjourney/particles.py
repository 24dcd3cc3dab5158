"""Short-lived particle effects and the frame animations that drive them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ericsjourney.entities import Vec2


@dataclass(frozen=True)
class IntRect:
    """A rectangle of a texture, in pixels."""

    left: int
    top: int
    width: int
    height: int


@dataclass
class Animation:
    """A sequence of texture frames played over ``duration`` milliseconds."""

    duration: float
    looping: bool = True
    frames: list[IntRect] = field(default_factory=list)
    elapsed: float = 0.0

    def add_frame(self, rect: IntRect) -> None:
        self.frames.append(rect)

    @property
    def current_frame(self) -> IntRect | None:
        if not self.frames:
            return None
        if self.duration <= 0:
            return self.frames[-1]
        index = int(self.elapsed * len(self.frames) / self.duration)
        return self.frames[min(index, len(self.frames) - 1)]

    @property
    def finished(self) -> bool:
        return not self.looping and self.elapsed >= self.duration

    def update(self, delta: float) -> IntRect | None:
        """Advance by ``delta`` milliseconds and return the frame now shown."""
        self.elapsed += delta
        if self.duration > 0:
            if self.looping:
                self.elapsed %= self.duration
            else:
                self.elapsed = min(self.elapsed, self.duration)
        return self.current_frame


class Effect(Enum):
    """Particle effects that the world can spawn."""

    HIT = 0
    EXPLOSION = 1
    UPGRADE = 2
    SPLINTERS = 3
    ROCK_EXPLOSION = 4
    COIN = 10


@dataclass(frozen=True)
class ParticleSpec:
    """Static description of a particle effect. A lifetime of -1 never expires."""

    texture: str
    lifetime: float
    origin: tuple[float, float]
    texture_rect: IntRect
    scale: tuple[float, float]
    bounds: float | None
    animation_duration: float
    frames: tuple[IntRect, ...]


def _column(size: int, count: int) -> tuple[IntRect, ...]:
    return tuple(IntRect(0, size * row, size, size) for row in range(count))


_SPECS: dict[Effect, ParticleSpec] = {
    Effect.HIT: ParticleSpec(
        texture="./resources/hit-sparkle.png",
        lifetime=2000,
        origin=(16, 16),
        texture_rect=IntRect(0, 5, 32, 32),
        scale=(1.5, 1.5),
        bounds=0.5,
        animation_duration=2000,
        frames=tuple(
            IntRect(left, top, 32, 32)
            for left, top in [(0, 0), (32, 0), (64, 0), (0, 32), (32, 32), (64, 32), (0, 64), (32, 64)]
        ),
    ),
    Effect.EXPLOSION: ParticleSpec(
        texture="./resources/projectiles/fireball-explosion.png",
        lifetime=2000,
        origin=(60, 86),
        texture_rect=IntRect(0, 5, 120, 172),
        scale=(0.35, 0.35),
        bounds=None,
        animation_duration=2000,
        frames=tuple(
            IntRect(left, top, 120, 172)
            for left, top in [(0, 0), (120, 0), (0, 172), (120, 172), (0, 344), (120, 344)]
        ),
    ),
    Effect.UPGRADE: ParticleSpec(
        texture="./resources/mejora.png",
        lifetime=2000,
        origin=(32, 32),
        texture_rect=IntRect(0, 5, 64, 64),
        scale=(1.5, 1.5),
        bounds=0.5,
        animation_duration=2000,
        frames=_column(64, 10),
    ),
    Effect.SPLINTERS: ParticleSpec(
        texture="./resources/astillas.png",
        lifetime=500,
        origin=(32, 32),
        texture_rect=IntRect(0, 5, 64, 64),
        scale=(1.0, 1.0),
        bounds=0.5,
        animation_duration=500,
        frames=_column(64, 8),
    ),
    Effect.ROCK_EXPLOSION: ParticleSpec(
        texture="./resources/explosion.png",
        lifetime=1000,
        origin=(16, 16),
        texture_rect=IntRect(0, 5, 32, 32),
        scale=(1.8, 1.8),
        bounds=0.5,
        animation_duration=1000,
        frames=_column(32, 8),
    ),
    Effect.COIN: ParticleSpec(
        texture="./resources/particles/gemBlue.png",
        lifetime=-1,
        origin=(32, 32),
        texture_rect=IntRect(0, 0, 64, 64),
        scale=(1.0, 1.0),
        bounds=None,
        animation_duration=2000,
        frames=(IntRect(0, 0, 64, 64),),
    ),
}


def spec_for(effect: Effect | int) -> ParticleSpec:
    """Return the description of an effect; unknown effect codes raise ValueError."""
    return _SPECS[Effect(effect)]


class Emitter:
    """A particle effect placed in the world, alive until its lifetime runs out."""

    def __init__(self, effect: Effect | int, location: Vec2) -> None:
        self.effect = Effect(effect)
        self.spec = spec_for(self.effect)
        self.location = location
        self.age = 0.0
        self.animation = Animation(self.spec.animation_duration, looping=False)
        for frame in self.spec.frames:
            self.animation.add_frame(frame)

    def update(self, delta: float) -> IntRect | None:
        """Age the emitter by ``delta`` milliseconds and return its current frame."""
        self.age += delta
        return self.animation.update(delta)

    def is_pending_delete(self) -> bool:
        return self.spec.lifetime >= 0 and self.age >= self.spec.lifetime