"""
Tests for landing rules: ground landings, stacking, misses and row checks.
"""

import pytest

from panda_stack.core.config_loader import load_config
from panda_stack.core.entity import Entity
from panda_stack.core.game import CoreGame
from panda_stack.core.stack import Stack
from panda_stack.core.stacking import StackingResolver

from conftest import drop_at


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    g = CoreGame(config=config, seed=42)
    g.reset()
    return g


@pytest.fixture
def resolver(config):
    return StackingResolver(config)


def panda(uid, x, y):
    return Entity(uid=uid, x=x, y=y, width=50, height=50)


class TestGroundLanding:
    """The first panda lands on the floor."""

    def test_first_panda_lands_on_floor(self, game):
        result = drop_at(game, 375)
        assert result.landed
        assert result.decision.reason == "ground"
        assert game.stack.top.y == 550
        assert game.stack.top.x == 375
        assert game.score == 1

    def test_new_panda_spawned_after_landing(self, game):
        drop_at(game, 375)
        assert game.falling is not None
        assert game.falling.uid != game.stack.top.uid

    def test_airborne_with_empty_stack(self, resolver):
        decision = resolver.evaluate(panda(0, 100, 200), Stack(), 0.0)
        assert not decision.landed
        assert decision.reason == "airborne"

    def test_ground_snap_subtracts_camera(self, resolver):
        decision = resolver.evaluate(panda(0, 100, 500), Stack(), 50.0)
        assert decision.landed
        assert decision.snap_y == 500


class TestStackLanding:
    """Landing on top of settled pandas."""

    def test_second_panda_stacks_on_first(self, game):
        drop_at(game, 375)
        result = drop_at(game, 380)
        assert result.landed
        assert result.decision.reason == "stack"
        assert game.stack.top.y == 500
        assert game.score == 2

    def test_non_overlapping_panda_misses(self, game, config):
        drop_at(game, 375)
        result = drop_at(game, 100)
        assert result.missed
        assert not result.landed
        assert game.lives == config.session.starting_lives - 1
        assert len(game.stack) == 1
        assert game.score == 1

    def test_replacement_spawned_after_miss(self, game):
        drop_at(game, 375)
        drop_at(game, 100)
        assert game.falling is not None

    def test_side_contact_does_not_land(self, resolver):
        stack = Stack()
        stack.append(panda(0, 375, 550))
        decision = resolver.evaluate(panda(1, 400, 540), stack, 0.0)
        assert not decision.landed
        assert decision.reason == "side_contact"

    def test_row_occupied_rejects_landing(self, resolver):
        stack = Stack()
        stack.append(panda(0, 300, 500))
        stack.append(panda(1, 375, 550))
        decision = resolver.evaluate(panda(2, 340, 501), stack, 0.0)
        assert not decision.landed
        assert decision.reason == "row_occupied"
        assert decision.support_uid == 1

    def test_only_first_overlap_is_examined(self, resolver):
        stack = Stack()
        stack.append(panda(0, 375, 550))
        stack.append(panda(1, 410, 520))
        # Touches the top of uid 0, but uid 1 is more recent and overlaps first
        decision = resolver.evaluate(panda(2, 380, 501), stack, 0.0)
        assert not decision.landed
        assert decision.reason == "side_contact"
        assert decision.support_uid == 1

    def test_no_overlap_with_stack(self, resolver):
        stack = Stack()
        stack.append(panda(0, 375, 550))
        decision = resolver.evaluate(panda(1, 0, 550), stack, 0.0)
        assert decision.reason == "no_overlap"

    def test_resolver_does_not_mutate(self, resolver):
        stack = Stack()
        stack.append(panda(0, 375, 550))
        falling = panda(1, 380, 502)
        resolver.evaluate(falling, stack, 0.0)
        assert falling.y == 502
        assert len(stack) == 1


class TestStackHeight:
    """Height counts distinct rows."""

    def test_empty_stack_height_zero(self, game):
        assert game.stack_height == 0

    def test_siblings_share_a_row(self, game):
        drop_at(game, 375)
        drop_at(game, 340)
        drop_at(game, 400)
        assert len(game.stack) == 3
        assert game.stack.row_count == 2
        assert game.stack_height == 100

    def test_tower_height(self, game):
        for _ in range(4):
            drop_at(game, 375)
        assert game.stack_height == 200
