"""
Input
=====

Buffers horizontal nudges between ticks and turns touch/mouse drags into
discrete left/right moves.
"""

from __future__ import annotations

from typing import List, Optional

from panda_stack.core.config_loader import GameConfig, get_config

LEFT = -1
RIGHT = 1


class InputBuffer:
    """
    Nudges queued by event handlers, drained once at the start of a tick.

    Draining hands back every pending direction in arrival order and empties
    the queue, so a tick sees either all of a batch or none of it.
    """

    def __init__(self):
        self._pending: List[int] = []

    def push(self, direction: int) -> None:
        if direction not in (LEFT, RIGHT):
            raise ValueError(f"Direction must be -1 or 1, got {direction}")
        self._pending.append(direction)

    def drain(self) -> List[int]:
        pending, self._pending = self._pending, []
        return pending

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)


class DragTracker:
    """
    Converts a drag into nudges.

    A move is reported once the pointer has travelled strictly more than the
    threshold from the reference point; the reference then jumps to the
    current position so a long drag yields a series of moves.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._threshold = config.input.drag_threshold
        self._reference_x: Optional[float] = None

    @property
    def active(self) -> bool:
        return self._reference_x is not None

    def start(self, x: float) -> None:
        self._reference_x = x

    def move(self, x: float) -> int:
        """
        Report pointer movement.

        Returns:
            RIGHT, LEFT, or 0 if the drag has not crossed the threshold.
        """
        if self._reference_x is None:
            return 0

        delta = x - self._reference_x
        if delta > self._threshold:
            self._reference_x = x
            return RIGHT
        if delta < -self._threshold:
            self._reference_x = x
            return LEFT
        return 0

    def end(self) -> None:
        self._reference_x = None
