"""Game logic for a top-down arcade shooter: actors, projectiles, enemies, particles and the level loop."""

__version__ = "0.1.0"