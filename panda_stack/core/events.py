"""
Feedback Events
===============

Fire-and-forget hooks for sound and visual feedback. Handlers never affect
game logic: a handler that raises is logged and skipped.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    STACK = "stack"          # A panda landed
    MISS = "miss"            # A panda reached the floor without a valid landing
    MOVE = "move"            # The falling panda was nudged sideways
    GAME_OVER = "game_over"  # Last life lost; payload carries final_score


Handler = Callable[..., Any]


class FeedbackHooks:
    """Registry of event handlers."""

    def __init__(self):
        self._handlers: Dict[GameEvent, List[Handler]] = {event: [] for event in GameEvent}

    def subscribe(self, event: GameEvent, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def unsubscribe(self, event: GameEvent, handler: Handler) -> None:
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def emit(self, event: GameEvent, **payload: Any) -> None:
        """Call every handler for the event with the payload as keywords."""
        for handler in list(self._handlers[event]):
            try:
                handler(**payload)
            except Exception:
                logger.warning("Feedback handler for %s failed", event.value, exc_info=True)

    def clear(self) -> None:
        for handlers in self._handlers.values():
            handlers.clear()
