# ericsjourney

The game logic of a top-down arcade shooter, kept apart from any
rendering layer. The player moves around a tiled room and shoots arrows
at the nearest enemy whenever it stands still. It collects upgrades, and
once every enemy is dead it walks through the door to the next level.

## Installing

```
pip install .
```

To run the test suite, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Modules

- `ericsjourney.entities` holds the geometry and the base actors.
  - `Vec2` is an immutable vector with `length()` and `normalized()`.
    `normalized()` raises `ValueError` on a zero vector.
  - `Rect` is an axis-aligned box with `intersects()`. Edges that only
    touch do not count as an intersection.
  - `Faction` and `ObjectType` are the enums for sides and collision
    channels.
  - `Actor` has `bounding_box()`, `set_lifespan()`, `move_to()`,
    `update()`, `on_actor_overlap()` and `take_damage()`.
  - `Pawn` adds direction, speed, health and faction. It has
    `set_direction()`, `is_alive()`, `take_damage()` and `die()`.
  - `Tile` is a map tile, which may be a door. `Trap` is a dynamic hazard.
- `ericsjourney.particles` holds sprite-sheet animations and visual
  emitters.
  - `IntRect` and `Animation` describe frames. `Animation.add_frame()`
    adds a frame and `Animation.update()` advances the animation.
  - `Effect` lists the particle effects.
  - `spec_for(effect)` returns the `ParticleSpec` for an effect. An
    unknown effect code raises `ValueError`.
  - `Emitter` ages with `update()` and reports `is_pending_delete()`.
- `ericsjourney.projectiles` holds `Projectile` and its kinds: `Arrow`,
  `BouncingArrow`, `FireBall`, `Rock` and `Almendra`.
  - `rotation_degrees(direction)` gives the sprite angle for a heading.
  - A `BouncingArrow` bounces off static geometry and breaks after two
    bounces.
- `ericsjourney.player` holds the `Player` pawn, the `Facing` enum, and
  the helpers `facing_for_angle()` and `animation_for_direction()`.
  - The player targets the closest living enemy.
  - It fires when it has stood still long enough.
  - It keeps its multi-arrow and damage upgrades.
- `ericsjourney.enemies` holds the enemies.
  - `Enemy` is the base class.
  - `Stalker` heads straight for the player.
  - `BouncingBoss` bounces off walls. When it dies it splits into two
    smaller copies while it still has children left.
- `ericsjourney.controller` holds `PlayerController`, which turns input
  into actions and `Upgrade`s.
  - `handle_key(key, now)` applies the cheat and upgrade keys Q, W, E, R,
    T, Y and G. It returns `False` for a key that has no binding.
  - `press()`, `move_towards(point)` and `stop()` handle the pointer.
- `ericsjourney.world` holds `Game`.
  - `Game` owns the actor list and the emitters.
  - `step(delta)` runs overlaps, updates and victory checks, then removes
    deleted actors.
  - `box_trace()` and `box_trace_ignoring()` look for an actor of a given
    object type inside a box.
  - The game moves through the levels and records a `GameResult` in
    `Game.result` when a game ends.

## Example

```python
from ericsjourney.world import Game

game = Game()
game.start_game()
player = game.player_character()

for _ in range(100):
    game.step(50.0)  # milliseconds since the last update

print(player.health_current, [type(e).__name__ for e in game.enemies()])
```

All times passed to `update()` and `step()` are in milliseconds.

## What it does not do

This package is logic only.

- **No drawing, windows or menus.** A renderer has to read actor
  positions, active animations and emitters by itself.
- **No map files.** To load levels, pass `Game(level_loader=...)` a
  callable. It receives a map name such as `"Mapa1.tmx"` and returns the
  level's actors. Without one, levels are empty.
- **No sound.** Sounds go to an optional `sound` callable, which receives
  a resource path.
- **No HUD.** Upgrades are collected in `PlayerController.upgrades` and
  passed to an optional `on_upgrade` callback.