[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ericsjourney"
version = "0.1.0"
description = "Game logic for a top-down arcade shooter: actors, projectiles, enemies, particles and the level loop"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "arcade", "shooter", "simulation", "projectiles"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ericsjourney"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
