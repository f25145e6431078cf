"""
Tests for game snapshots and the observation arrays built from them.
"""

import dataclasses

import numpy as np
import pytest

from panda_stack.core.config_loader import load_config
from panda_stack.core.entity import Entity
from panda_stack.core.stack import Stack
from panda_stack.core.state_snapshot import SnapshotBuilder


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def small_config(config):
    return dataclasses.replace(config, caps=dataclasses.replace(config.caps, max_stack=3))


def build_stack(count):
    stack = Stack()
    for uid in range(count):
        stack.append(Entity(uid=uid, x=10.0 * uid, y=550.0 - 50 * uid, width=50, height=50))
    return stack


class TestSnapshotBuilder:

    def test_padding_and_mask(self, config):
        snapshot = SnapshotBuilder(config).build(
            falling=None, stack=build_stack(2), lives=3, score=2, ticks=10, camera_offset=0.0
        )
        obs = snapshot.to_obs_dict()

        assert obs["stack_mask"].tolist()[:3] == [1, 1, 0]
        assert obs["stack_mask"].sum() == 2
        assert obs["falling_present"] == 0
        assert obs["stack_count"] == 2
        assert obs["stack_height"] == 100

    def test_overflow_keeps_most_recent(self, small_config):
        """A tower taller than the array keeps its latest landings."""
        snapshot = SnapshotBuilder(small_config).build(
            falling=None, stack=build_stack(5), lives=3, score=5, ticks=10, camera_offset=50.0
        )
        obs = snapshot.to_obs_dict()

        assert obs["stack_x"].shape == (3,)
        assert obs["stack_mask"].tolist() == [1, 1, 1]
        np.testing.assert_array_equal(obs["stack_x"], np.array([20.0, 30.0, 40.0], dtype=np.float32))
        np.testing.assert_array_equal(obs["stack_y"], np.array([450.0, 400.0, 350.0], dtype=np.float32))
        assert obs["stack_count"] == 5

    def test_falling_panda_fields(self, config):
        falling = Entity(uid=9, x=120.0, y=-20.0, width=50, height=50)
        snapshot = SnapshotBuilder(config).build(
            falling=falling, stack=Stack(), lives=2, score=0, ticks=1, camera_offset=0.0
        )
        obs = snapshot.to_obs_dict()

        assert obs["falling_present"] == 1
        assert obs["falling_x"] == pytest.approx(120.0)
        assert obs["falling_y"] == pytest.approx(-20.0)
        assert obs["lives"] == 2
