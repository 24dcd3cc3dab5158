import pytest

from ericsjourney.entities import Actor, Faction, ObjectType, Pawn, Vec2
from ericsjourney.enemies import BouncingBoss, Enemy, Stalker
from ericsjourney.particles import IntRect


class FakeWorld:
    def __init__(self, player=None, obstacle=None):
        self.player = player
        self.obstacle = obstacle
        self.spawned = []
        self.traces = []

    def player_character(self):
        return self.player

    def spawn_actor(self, actor):
        self.spawned.append(actor)

    def box_trace(self, rect, object_type):
        self.traces.append((rect, object_type))
        return self.obstacle


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def test_enemy_toggle_target():
    enemy = Enemy()
    enemy.toggle_target(True)
    assert enemy.targeted is True
    enemy.toggle_target(False)
    assert enemy.targeted is False
    assert enemy.faction == Faction.ENEMY


def test_stalker_defaults():
    stalker = Stalker()
    assert stalker.location == Vec2(340.0, 520.0)
    assert stalker.movement_speed == pytest.approx(0.05)
    assert stalker.health_current == stalker.health_max == 100.0


def test_stalker_follows_player():
    player = Pawn(location=Vec2(10.0, -50.0), faction=Faction.ALLIE)
    stalker = Stalker(FakeWorld(player))
    stalker.follow_player()
    assert stalker.direction.length() == pytest.approx(1.0)
    distance = (player.location - stalker.location).length()
    reached = stalker.location + stalker.direction * distance
    assert reached.x == pytest.approx(player.location.x)
    assert reached.y == pytest.approx(player.location.y)


def test_stalker_update_points_at_player():
    player = Pawn(location=Vec2(340.0, 0.0), faction=Faction.ALLIE)
    stalker = Stalker(FakeWorld(player))
    stalker.update(16.0)
    assert stalker.direction.x == pytest.approx(0.0)
    assert stalker.direction.y == pytest.approx(-1.0)


def test_stalker_die_plays_dead_animation():
    stalker = Stalker()
    stalker.die()
    assert stalker.lifespan == 1.5
    assert stalker.active_animation.frames == [IntRect(0, 747, 401, 249)]


def test_boss_defaults():
    boss = BouncingBoss()
    assert boss.children == 4
    assert boss.direction == Vec2(0.5, 0.5)
    assert boss.health_current == 100.0
    assert boss.movement_speed == pytest.approx(0.35)


def test_boss_die_splits_into_two_children():
    world = FakeWorld()
    boss = BouncingBoss(Vec2(0.6, 0.8), children=2, world=world)
    boss.location = Vec2(200.0, 300.0)
    boss.die()
    assert boss.lifespan == pytest.approx(0.1)
    assert len(world.spawned) == 2
    first, second = world.spawned
    assert first.direction == Vec2(-0.6, 0.8)
    assert second.direction == Vec2(0.6, -0.8)
    for child in world.spawned:
        assert child.children == 1
        assert child.health_max == 200.0
        assert child.sprite_scale == pytest.approx(0.8)
        assert child.location == boss.location
        assert child.width < boss.width


def test_boss_without_children_spawns_nothing():
    world = FakeWorld()
    boss = BouncingBoss(Vec2(1.0, 0.0), children=0, world=world)
    boss.die()
    assert world.spawned == []
    assert boss.lifespan == pytest.approx(0.1)


def test_lethal_damage_splits_boss():
    world = FakeWorld()
    boss = BouncingBoss(world=world, clock=FakeClock())
    boss.take_damage(150.0, None, "ARROW")
    assert not boss.is_alive()
    assert len(world.spawned) == 2


def test_hit_animation_lasts_until_timer_expires():
    clock = FakeClock(1000.0)
    boss = BouncingBoss(clock=clock)
    assert boss.refresh_status(1000.0) == "MOVING"
    boss.take_damage(10.0, None, "ARROW")
    assert boss.refresh_status(1000.0 + 2499) == "HIT"
    assert boss.active_animation is boss.animations["HIT"]
    assert boss.refresh_status(1000.0 + 2500) == "MOVING"


def test_overlap_damages_allies_with_cooldown():
    clock = FakeClock(0.0)
    boss = BouncingBoss(clock=clock)
    ally = Pawn(faction=Faction.ALLIE)
    boss.on_actor_overlap(ally)
    assert ally.health_current == ally.health_max - boss.damage_base
    boss.on_actor_overlap(ally)
    assert ally.health_current == ally.health_max - boss.damage_base
    boss.refresh_status(500.0)
    boss.on_actor_overlap(ally)
    assert ally.health_current == ally.health_max - 2 * boss.damage_base


def test_overlap_ignores_enemies():
    boss = BouncingBoss(clock=FakeClock())
    other = Pawn(faction=Faction.ENEMY)
    boss.on_actor_overlap(other)
    assert other.health_current == other.health_max
    assert boss.dmg_cooldown_end is None


def test_update_moves_freely():
    world = FakeWorld()
    boss = BouncingBoss(Vec2(1.0, 0.0), world=world)
    start = boss.location
    boss.update(10.0)
    assert boss.location.x > start.x
    assert boss.location.y == start.y
    assert boss.last_location == start
    assert world.traces[0][1] is ObjectType.WORLD_STATIC


def test_update_bounces_off_wall_below():
    wall = Actor(location=Vec2(100.0, 150.0), width=50, height=50)
    boss = BouncingBoss(Vec2(0.0, 1.0), world=FakeWorld(obstacle=wall))
    boss.update(10.0)
    assert boss.direction == Vec2(0.0, -1.0)
    assert boss.location == boss.last_location


def test_update_bounces_horizontally_off_wall_to_the_side():
    wall = Actor(location=Vec2(150.0, 100.0), width=50, height=50)
    boss = BouncingBoss(Vec2(1.0, 0.0), world=FakeWorld(obstacle=wall))
    boss.update(10.0)
    assert boss.direction == Vec2(-1.0, 0.0)


def test_update_door_forces_vertical_turn():
    door = Actor(location=Vec2(150.0, 100.0), width=50, height=50, object_type=ObjectType.DOOR)
    boss = BouncingBoss(Vec2(1.0, 0.5), world=FakeWorld(obstacle=door))
    boss.update(10.0)
    assert boss.direction == Vec2(1.0, -0.5)


def test_update_unsticks_zero_direction():
    boss = BouncingBoss(Vec2(0.5, 0.5), world=FakeWorld())
    boss.set_direction(Vec2())
    boss.update(10.0)
    assert boss.direction == Vec2(-0.5, -0.5)