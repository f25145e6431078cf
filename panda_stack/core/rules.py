"""
Game Rules
==========

Handles spawn positioning, floor contact and episode caps.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from panda_stack.core.config_loader import GameConfig, get_config
from panda_stack.core.entity import Entity


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)

    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class SpawnRules:
    """
    Places new pandas.

    X is uniform over positions that keep the panda fully on screen; Y puts
    the panda just above the visible top edge for the current camera offset.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """
        Initialize spawn rules.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._board_width = config.board.width
        self._width = config.entity.width
        self._height = config.entity.height

    @property
    def max_x(self) -> float:
        """Right-most spawn x."""
        return self._board_width - self._width

    def spawn_x(self) -> float:
        return self._rng.random() * self.max_x

    def spawn_y(self, camera_offset: float) -> float:
        """Y whose screen position is one panda above the top edge."""
        return -self._height - camera_offset

    def make_entity(self, uid: int, camera_offset: float, x: Optional[float] = None) -> Entity:
        """
        Create a falling panda.

        Args:
            uid: Identifier for the new panda.
            camera_offset: Current gameplay camera offset.
            x: Explicit x, or None for a random position.
        """
        if x is None:
            x = self.spawn_x()
        return Entity(
            uid=uid,
            x=float(x),
            y=self.spawn_y(camera_offset),
            width=self._width,
            height=self._height
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator.

        Args:
            seed: New random seed. Keeps current sequence if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)


class FloorRules:
    """Floor contact in screen space."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._floor_y = config.floor_y

    @property
    def floor_y(self) -> float:
        return self._floor_y

    def at_floor(self, entity: Entity, camera_offset: float) -> bool:
        """True once the panda's bottom has reached the floor line on screen."""
        return entity.is_on_floor(self._floor_y, camera_offset)


class TerminationRules:
    """
    Episode limits for agent runs.

    - Round end: the last life was lost
    - Tick cap: maximum ticks per episode
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._max_ticks = config.caps.max_ticks

    @property
    def max_ticks(self) -> int:
        return self._max_ticks

    def check_termination(self, round_over: bool, ticks: int) -> TerminationResult:
        """
        Check all termination conditions.

        Args:
            round_over: True if the round ended this tick.
            ticks: Ticks elapsed in the episode.

        Returns:
            TerminationResult indicating episode state.
        """
        if round_over:
            return TerminationResult.game_over("lives_exhausted")

        if ticks >= self._max_ticks:
            return TerminationResult.truncation("tick_cap")

        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for spawn placement.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.spawn = SpawnRules(config, seed)
        self.floor = FloorRules(config)
        self.termination = TerminationRules(config)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset all rule state."""
        self.spawn.reset(seed)
