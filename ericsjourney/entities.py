"""Core world entities: vectors, rectangles, actors, pawns, tiles and traps."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector in world coordinates."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec2:
        return Vec2(self.x / divisor, self.y / divisor)

    def __bool__(self) -> bool:
        return self.x != 0.0 or self.y != 0.0

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector with the same direction; a zero vector cannot be normalized."""
        size = self.length()
        if size == 0.0:
            raise ValueError("cannot normalize a zero vector")
        return self / size


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_center(cls, center: Vec2, width: float, height: float) -> Rect:
        return cls(center.x - width / 2, center.y - height / 2, width, height)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def _span_x(self) -> tuple[float, float]:
        return min(self.left, self.right), max(self.left, self.right)

    def _span_y(self) -> tuple[float, float]:
        return min(self.top, self.bottom), max(self.top, self.bottom)

    def intersects(self, other: Rect) -> bool:
        """True when the two rectangles share an area; touching edges do not count."""
        a_left, a_right = self._span_x()
        b_left, b_right = other._span_x()
        a_top, a_bottom = self._span_y()
        b_top, b_bottom = other._span_y()
        return max(a_left, b_left) < min(a_right, b_right) and max(a_top, b_top) < min(
            a_bottom, b_bottom
        )


class Faction(Enum):
    """Side an actor fights for."""

    ALLIE = "allie"
    ENEMY = "enemy"


class ObjectType(Enum):
    """Collision channel of an actor."""

    WORLD_STATIC = "worldstatic"
    WORLD_DYNAMIC = "worlddynamic"
    DOOR = "door"
    POWERUP = "powerup"
    PROJECTILE = "projectile"
    PAWN = "pawn"


class Actor:
    """Anything that lives in the world, has a location and a bounding box."""

    def __init__(
        self,
        location: Vec2 | None = None,
        width: float = 0.0,
        height: float = 0.0,
        object_type: ObjectType = ObjectType.WORLD_STATIC,
        texture_file: str = "",
    ) -> None:
        self.location = location if location is not None else Vec2()
        self.last_location = self.location
        self.width = width
        self.height = height
        self.object_type = object_type
        self.texture_file = texture_file
        self.pending_delete = False
        self.asleep = False
        self.lifespan: float | None = None

    def bounding_box(self) -> Rect:
        """The actor's collision box, centred on its location."""
        return Rect.from_center(self.location, self.width, self.height)

    def set_lifespan(self, seconds: float) -> None:
        """Schedule removal after the given number of seconds; zero removes at once."""
        self.lifespan = seconds
        if seconds <= 0.0:
            self.pending_delete = True

    def move_to(self, location: Vec2) -> None:
        """Move to a new location, remembering the previous one."""
        self.last_location = self.location
        self.location = location

    def update(self, delta: float) -> None:
        """Advance the actor by ``delta`` milliseconds."""
        if self.lifespan is not None and not self.pending_delete:
            self.lifespan -= delta / 1000.0
            if self.lifespan <= 0.0:
                self.pending_delete = True

    def on_actor_overlap(self, other: Actor) -> None:
        """React to another actor overlapping this one."""

    def take_damage(self, damage: float, causer: Actor | None, damage_type: str) -> None:
        """React to damage; plain actors ignore it."""


class Pawn(Actor):
    """An actor that moves in a direction, has health and belongs to a faction."""

    def __init__(
        self,
        location: Vec2 | None = None,
        width: float = 0.0,
        height: float = 0.0,
        faction: Faction = Faction.ENEMY,
        health_max: float = 100.0,
        movement_speed: float = 0.0,
        texture_file: str = "",
    ) -> None:
        super().__init__(location, width, height, ObjectType.PAWN, texture_file)
        self.direction = Vec2()
        self.last_direction = Vec2()
        self.movement_speed = movement_speed
        self.health_max = health_max
        self.health_current = health_max
        self.damage_base = 0.0
        self.damage_multiplier = 0.0
        self.faction = faction
        self.last_hit_effect: str | None = None

    def set_direction(self, direction: Vec2) -> None:
        """Change direction, keeping the previous one as the last direction."""
        self.last_direction = self.direction
        self.direction = direction

    def is_alive(self) -> bool:
        return self.health_current > 0

    def take_damage(self, damage: float, causer: Actor | None, damage_type: str) -> None:
        if self.health_current <= 0:
            return
        self.health_current -= damage
        if self.is_alive():
            self.apply_hit_effects(damage_type)
        else:
            self.die()

    def apply_hit_effects(self, damage_type: str) -> None:
        """Record the kind of the last non-lethal hit so feedback can be shown for it."""
        self.last_hit_effect = damage_type

    def die(self) -> None:
        """Remove the pawn from the world."""
        self.set_lifespan(0.0)

    def update(self, delta: float) -> None:
        if self.direction and self.is_alive():
            self.move_to(self.location + self.direction * (self.movement_speed * delta))
        super().update(delta)


class Tile(Actor):
    """A static map tile; may be a door that opens when a level is cleared."""

    def __init__(
        self,
        texture_file: str,
        x: float,
        y: float,
        width: float,
        height: float,
        object_type: ObjectType = ObjectType.WORLD_STATIC,
        is_door: bool = False,
    ) -> None:
        # Map coordinates come in as (row, column): x is vertical, y horizontal.
        location = Vec2(y + width / 2, x + height / 2)
        super().__init__(location, width, height, object_type, texture_file)
        self.is_door = is_door


class Trap(Actor):
    """A dynamic hazard placed in the map."""

    def __init__(self, location: Vec2 | None = None) -> None:
        super().__init__(
            location if location is not None else Vec2(0.0, 0.0),
            object_type=ObjectType.WORLD_DYNAMIC,
            texture_file="./resources/traps/spikes.png",
        )
        self.damage_factor = 0.2
        self.target: Actor | None = None