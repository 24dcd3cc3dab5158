import math

import pytest

from ericsjourney.entities import Faction, ObjectType, Pawn, Tile, Vec2
from ericsjourney.particles import Effect
from ericsjourney.projectiles import (
    HIT_SOUND,
    Almendra,
    Arrow,
    BouncingArrow,
    FireBall,
    Projectile,
    Rock,
    rotation_degrees,
)


class FakeWorld:
    def __init__(self, hits=None):
        self.hits = list(hits or [])
        self.emitters = []
        self.traces = []

    def spawn_emitter(self, effect, location):
        self.emitters.append((effect, location))

    def box_trace(self, rect, object_type):
        self.traces.append((rect, object_type))
        return self.hits.pop(0) if self.hits else None


class FixedRng:
    def __init__(self, value):
        self.value = value

    def randrange(self, stop):
        assert stop == 20
        return self.value


def enemy(location=Vec2(0.0, 0.0)):
    return Pawn(location=location, width=10, height=10, faction=Faction.ENEMY, health_max=100.0)


def ally(location=Vec2(0.0, 0.0)):
    return Pawn(location=location, width=10, height=10, faction=Faction.ALLIE, health_max=100.0)


def wall(x=0.0, y=0.0):
    return Tile("wall.png", x, y, 32, 32)


def test_rotation_degrees_points_against_direction():
    assert math.isclose(rotation_degrees(Vec2(-1.0, 0.0)), 0.0, abs_tol=1e-9)
    assert math.isclose(abs(rotation_degrees(Vec2(1.0, 0.0))), 180.0)


def test_rotation_is_opposite_for_opposite_directions():
    d = Vec2(0.3, -0.7)
    diff = rotation_degrees(d) - rotation_degrees(-d)
    assert math.isclose(abs(diff), 180.0)


def test_base_projectile_defaults_and_no_movement():
    proj = Projectile()
    assert proj.direction == Vec2(1.0, 1.0)
    assert proj.damage == 20
    assert proj.target_faction is Faction.ALLIE
    assert proj.object_type is ObjectType.PROJECTILE
    proj.update(100.0)
    assert proj.location == Vec2(0.0, 0.0)


def test_base_projectile_damages_ally_once():
    proj = Projectile(Vec2(1.0, 0.0), Vec2(5.0, 5.0))
    target = ally()
    proj.on_actor_overlap(target)
    proj.on_actor_overlap(target)
    assert target.health_current == 100.0 - proj.damage
    assert proj.pending_delete


def test_base_projectile_ignores_other_faction():
    proj = Projectile(Vec2(1.0, 0.0), Vec2(5.0, 5.0))
    target = enemy()
    proj.on_actor_overlap(target)
    assert target.health_current == 100.0
    assert not proj.pending_delete


def test_modify_damage_scales():
    proj = Arrow()
    before = proj.damage
    proj.modify_damage(1.2)
    assert math.isclose(proj.damage, before * 1.2)


def test_arrow_moves_along_direction():
    arrow = Arrow(Vec2(0.6, 0.8), Vec2(10.0, 20.0))
    arrow.update(40.0)
    step = Vec2(0.6, 0.8) * (arrow.movement_speed * 40.0)
    assert math.isclose(arrow.location.x, 10.0 + step.x)
    assert math.isclose(arrow.location.y, 20.0 + step.y)
    assert arrow.last_location == Vec2(10.0, 20.0)
    assert math.isclose(arrow.rotation, rotation_degrees(Vec2(0.6, 0.8)))


def test_arrow_damages_enemy_with_spread_and_sound():
    sounds = []
    arrow = Arrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0), sound=sounds.append, rng=FixedRng(15))
    target = enemy()
    arrow.on_actor_overlap(target)
    assert target.health_current == 100.0 - (arrow.damage + 15 - 10)
    assert sounds == [HIT_SOUND]
    assert arrow.pending_delete


@pytest.mark.parametrize("roll", [0, 19])
def test_arrow_damage_stays_within_spread(roll):
    arrow = Arrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0), rng=FixedRng(roll))
    target = enemy()
    arrow.on_actor_overlap(target)
    taken = 100.0 - target.health_current
    assert arrow.damage - 10 <= taken < arrow.damage + 10


def test_arrow_ignores_allies():
    arrow = Arrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0), rng=FixedRng(0))
    friend = ally()
    arrow.on_actor_overlap(friend)
    assert friend.health_current == 100.0
    assert not arrow.pending_delete


def test_arrow_hitting_wall_spawns_debris():
    world = FakeWorld()
    sounds = []
    arrow = Arrow(Vec2(1.0, 0.0), Vec2(3.0, 4.0), world=world, sound=sounds.append)
    arrow.on_actor_overlap(wall())
    assert [e for e, _ in world.emitters] == [Effect.ROCK_EXPLOSION]
    assert world.emitters[0][1] == Vec2(3.0, 4.0)
    assert HIT_SOUND in sounds
    assert arrow.pending_delete


def test_fireball_explodes_on_wall():
    world = FakeWorld()
    ball = FireBall(Vec2(0.0, 1.0), Vec2(0.0, 0.0), world=world)
    ball.on_actor_overlap(wall())
    assert [e for e, _ in world.emitters] == [Effect.EXPLOSION]
    assert ball.pending_delete


def test_fireball_hurts_player_faction():
    ball = FireBall(Vec2(0.0, 1.0), Vec2(0.0, 0.0))
    target = ally()
    ball.on_actor_overlap(target)
    assert target.health_current == 100.0 - ball.damage


def test_almendra_splinters_on_wall():
    world = FakeWorld()
    nut = Almendra(Vec2(0.0, 1.0), Vec2(0.0, 0.0), world=world)
    nut.on_actor_overlap(wall())
    assert [e for e, _ in world.emitters] == [Effect.SPLINTERS]
    assert nut.pending_delete


def test_rock_destroy_spawns_rock_explosion():
    world = FakeWorld()
    rock = Rock(Vec2(1.0, 0.0), Vec2(7.0, 8.0), world=world)
    rock.on_actor_overlap(ally())
    assert world.emitters == [(Effect.ROCK_EXPLOSION, Vec2(7.0, 8.0))]
    assert rock.pending_delete


def test_bouncing_arrow_reflects_horizontally():
    start = Vec2(100.0, 100.0)
    blocker = wall()
    blocker.location = Vec2(150.0, 100.0)
    world = FakeWorld(hits=[blocker])
    arrow = BouncingArrow(Vec2(1.0, 0.0), start, world=world)
    arrow.update(10.0)
    assert arrow.direction == Vec2(-1.0, 0.0)
    assert arrow.bounce_count == 1
    assert not arrow.pending_delete
    assert arrow.location.x > start.x


def test_bouncing_arrow_reflects_vertically():
    blocker = wall()
    blocker.location = Vec2(100.0, 150.0)
    world = FakeWorld(hits=[blocker])
    arrow = BouncingArrow(Vec2(0.0, 1.0), Vec2(100.0, 100.0), world=world)
    arrow.update(10.0)
    assert arrow.direction == Vec2(0.0, -1.0)


def test_bouncing_arrow_trace_box_is_shrunk():
    world = FakeWorld()
    arrow = BouncingArrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0), world=world)
    arrow.update(10.0)
    rect, kind = world.traces[0]
    box = arrow.bounding_box()
    assert kind is ObjectType.WORLD_STATIC
    assert math.isclose(rect.width, box.width - 10)
    assert math.isclose(rect.height, box.height - 10)


def test_bouncing_arrow_breaks_after_max_bounces():
    first, second = wall(), wall()
    first.location = Vec2(150.0, 100.0)
    second.location = Vec2(50.0, 100.0)
    world = FakeWorld(hits=[first, second])
    arrow = BouncingArrow(Vec2(1.0, 0.0), Vec2(100.0, 100.0), world=world)
    arrow.update(1.0)
    assert not arrow.pending_delete
    arrow.update(1.0)
    assert arrow.bounce_count == arrow.max_bounce_count
    assert arrow.pending_delete
    assert [e for e, _ in world.emitters] == [Effect.SPLINTERS]


def test_bouncing_arrow_pierces_but_hits_each_enemy_once():
    arrow = BouncingArrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0), rng=FixedRng(10))
    first, second = enemy(), enemy()
    arrow.on_actor_overlap(first)
    arrow.on_actor_overlap(first)
    arrow.on_actor_overlap(second)
    assert first.health_current == 100.0 - arrow.damage
    assert second.health_current == 100.0 - arrow.damage
    assert arrow.last_damaged is second
    assert not arrow.pending_delete


def test_bouncing_arrow_survives_wall_overlap():
    arrow = BouncingArrow(Vec2(1.0, 0.0), Vec2(0.0, 0.0))
    arrow.on_actor_overlap(wall())
    assert not arrow.pending_delete
    assert arrow.last_damaged is None