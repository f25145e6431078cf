"""
Shared test helpers.
"""

import os
from pathlib import Path

import pytest
import yaml

import panda_stack

DEFAULT_CONFIG_PATH = Path(panda_stack.__file__).parent / "game_config.yaml"

# Headless pygame for renderer tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def write_config(tmp_path):
    """Write a copy of the default config with some sections overridden."""
    def _write(**overrides):
        with open(DEFAULT_CONFIG_PATH, "r") as f:
            raw = yaml.safe_load(f)
        for section, values in overrides.items():
            raw.setdefault(section, {}).update(values)
        path = tmp_path / "game_config.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(raw, f)
        return str(path)
    return _write


def drop_at(game, x, max_ticks=2000):
    """Spawn a panda at x and tick until it lands or misses."""
    game.spawn_falling(x=x)
    for _ in range(max_ticks):
        result = game.tick()
        if result.landed or result.missed:
            return result
    raise AssertionError(f"panda at x={x} never resolved")
