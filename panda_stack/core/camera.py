"""
Camera
======

Vertical scroll that keeps the top of a growing tower on screen.
"""

from __future__ import annotations

import logging
from typing import Optional

from panda_stack.core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class Camera:
    """
    Holds the vertical offset added to world y for rendering and floor checks.

    `offset` is the gameplay value and only ever grows within a round. With
    easing enabled, `render_offset` trails it and catches up by at most
    `easing_speed` per tick; otherwise both are always equal.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize camera.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._step = config.entity.height
        self._threshold = config.camera_threshold
        self._easing = config.camera.easing
        self._easing_speed = config.camera.easing_speed

        self._offset: float = 0.0
        self._render_offset: float = 0.0

    @property
    def offset(self) -> float:
        """Gameplay offset."""
        return self._offset

    @property
    def render_offset(self) -> float:
        """Offset to draw with."""
        return self._render_offset

    @property
    def threshold(self) -> float:
        """Stack height the tower must exceed before scrolling."""
        return self._threshold

    def follow_stack(self, previous_height: float, new_height: float) -> bool:
        """
        Shift one entity height if the tower just grew past the threshold.

        Args:
            previous_height: Stack height before the landing.
            new_height: Stack height after the landing.

        Returns:
            True if the camera shifted.
        """
        if new_height > previous_height and new_height > self._threshold:
            self._offset += self._step
            if not self._easing:
                self._render_offset = self._offset
            logger.debug("Camera shift to %.1f (stack height %.1f)", self._offset, new_height)
            return True
        return False

    def update(self) -> None:
        """Advance the rendered offset one tick toward the gameplay offset."""
        remaining = self._offset - self._render_offset
        if remaining <= 0:
            return
        self._render_offset += min(remaining, self._easing_speed)

    def reset(self) -> None:
        self._offset = 0.0
        self._render_offset = 0.0
