"""
Stacking Resolver
=================

Decides whether the falling panda has landed, where it snaps to, and
whether the landing is legal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from panda_stack.core.config_loader import GameConfig, get_config
from panda_stack.core.entity import Entity
from panda_stack.core.stack import Stack


@dataclass
class LandingDecision:
    """Outcome of one landing check."""
    landed: bool
    reason: str
    snap_y: Optional[float] = None
    support_uid: Optional[int] = None

    @staticmethod
    def ground(snap_y: float) -> "LandingDecision":
        return LandingDecision(True, "ground", snap_y)

    @staticmethod
    def on_stack(snap_y: float, support_uid: int) -> "LandingDecision":
        return LandingDecision(True, "stack", snap_y, support_uid)

    @staticmethod
    def rejected(reason: str, support_uid: Optional[int] = None) -> "LandingDecision":
        return LandingDecision(False, reason, None, support_uid)


class StackingResolver:
    """
    Landing rules.

    - Empty stack: the panda lands when its bottom reaches the floor line and
      is snapped so its bottom sits exactly on it.
    - Non-empty stack: the stack is scanned from the latest landing back.
      Only the first panda overlapping the falling one is considered. The
      landing is valid when the falling bottom is within one gravity step of
      that panda's top, the x-ranges overlap, and no other panda already
      occupies the row the falling one would snap into.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize resolver.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._floor_y = config.floor_y
        self._gravity = config.entity.gravity
        self._entity_height = config.entity.height

    def evaluate(
        self,
        falling: Entity,
        stack: Stack,
        camera_offset: float
    ) -> LandingDecision:
        """
        Decide landing for the current tick. Does not mutate anything.

        Args:
            falling: The falling panda.
            stack: Settled pandas.
            camera_offset: Current gameplay camera offset.

        Returns:
            LandingDecision describing the outcome.
        """
        if not stack:
            if falling.is_on_floor(self._floor_y, camera_offset):
                return LandingDecision.ground(self._floor_y - self._entity_height - camera_offset)
            return LandingDecision.rejected("airborne")

        for candidate in stack.most_recent_first():
            if not falling.overlaps(candidate):
                continue

            # The scan stops at the first overlapping panda whatever the outcome
            if not self._touches_top(falling, candidate):
                return LandingDecision.rejected("side_contact", candidate.uid)

            target_y = candidate.y - self._entity_height
            occupant = stack.row_occupant(target_y, falling, exclude_uid=candidate.uid)
            if occupant is not None:
                return LandingDecision.rejected("row_occupied", candidate.uid)

            return LandingDecision.on_stack(target_y, candidate.uid)

        return LandingDecision.rejected("no_overlap")

    def _touches_top(self, falling: Entity, candidate: Entity) -> bool:
        """Falling bottom within one gravity step below the candidate's top."""
        return (
            candidate.y <= falling.bottom <= candidate.y + self._gravity
            and falling.overlaps_x(candidate)
        )
