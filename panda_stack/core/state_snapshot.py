"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from panda_stack.core.config_loader import GameConfig, get_config
from panda_stack.core.entity import Entity
from panda_stack.core.stack import Stack


@dataclass
class GameSnapshot:
    """
    Game state at the end of a tick.

    Stack arrays are fixed-size with a mask. When the tower holds more pandas
    than fit, the most recent ones are kept.
    """
    # Falling panda (zeros when absent)
    falling_present: bool
    falling_x: float
    falling_y: float

    # Session
    lives: int
    score: int
    ticks: int

    # Tower and camera
    camera_offset: float
    stack_height: float
    stack_count: int

    # Board info (for normalization)
    board_width: float
    board_height: float

    # Stack arrays (fixed size, padded)
    stack_x: np.ndarray           # (MAX_STACK,) float32
    stack_y: np.ndarray           # (MAX_STACK,) float32
    stack_mask: np.ndarray        # (MAX_STACK,) bool

    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "falling_present": np.array(int(self.falling_present), dtype=np.int8),
            "falling_x": np.array(self.falling_x, dtype=np.float32),
            "falling_y": np.array(self.falling_y, dtype=np.float32),
            "lives": np.array(self.lives, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "camera_offset": np.array(self.camera_offset, dtype=np.float32),
            "stack_height": np.array(self.stack_height, dtype=np.float32),
            "stack_count": np.array(self.stack_count, dtype=np.int32),
            "stack_x": self.stack_x,
            "stack_y": self.stack_y,
            "stack_mask": self.stack_mask.astype(np.int8),
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds GameSnapshot instances from live game objects."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_stack = config.caps.max_stack

    def build(
        self,
        falling: Optional[Entity],
        stack: Stack,
        lives: int,
        score: int,
        ticks: int,
        camera_offset: float,
        board_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """
        Build a snapshot.

        Args:
            falling: The falling panda, if any.
            stack: Settled pandas.
            lives: Lives remaining.
            score: Current score.
            ticks: Ticks elapsed.
            camera_offset: Gameplay camera offset.
            board_rgb: Optional rendered frame.
        """
        stack_x = np.zeros(self._max_stack, dtype=np.float32)
        stack_y = np.zeros(self._max_stack, dtype=np.float32)
        stack_mask = np.zeros(self._max_stack, dtype=bool)

        recent = stack.entities[-self._max_stack:]
        for i, entity in enumerate(recent):
            stack_x[i] = entity.x
            stack_y[i] = entity.y
            stack_mask[i] = True

        return GameSnapshot(
            falling_present=falling is not None,
            falling_x=falling.x if falling is not None else 0.0,
            falling_y=falling.y if falling is not None else 0.0,
            lives=lives,
            score=score,
            ticks=ticks,
            camera_offset=camera_offset,
            stack_height=stack.height(self._config.entity.height),
            stack_count=len(stack),
            board_width=float(self._config.board.width),
            board_height=float(self._config.board.height),
            stack_x=stack_x,
            stack_y=stack_y,
            stack_mask=stack_mask,
            board_rgb=board_rgb
        )
