"""
Entity
======

A panda: an axis-aligned rectangle with a stable id. The same type is used for
the falling panda and for the settled ones in the stack.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Entity:
    """
    A single panda in world coordinates.

    (x, y) is the top-left corner. World coordinates ignore the camera; the
    camera offset is only added for rendering and floor comparisons.
    """
    uid: int
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps_x(self, other: "Entity") -> bool:
        """True if the horizontal ranges intersect (touching edges do not count)."""
        return self.x < other.right and self.right > other.x

    def overlaps_y(self, other: "Entity") -> bool:
        """True if the vertical ranges intersect (touching edges do not count)."""
        return self.y < other.bottom and self.bottom > other.y

    def overlaps(self, other: "Entity") -> bool:
        """Axis-aligned bounding box intersection."""
        return self.overlaps_x(other) and self.overlaps_y(other)

    def screen_bottom(self, camera_offset: float) -> float:
        """Bottom edge in screen space."""
        return self.bottom + camera_offset

    def is_on_floor(self, floor_y: float, camera_offset: float) -> bool:
        """True once the bottom edge has reached or passed the floor line."""
        return self.screen_bottom(camera_offset) >= floor_y

    def update(
        self,
        gravity: float,
        camera_offset: float,
        screen_width: float,
        screen_height: float
    ) -> None:
        """
        Advance one tick: fall by one gravity step and wrap horizontally.

        The fall stops once the bottom edge reaches the bottom of the screen.
        This is a screen-space clamp; landing is decided by the resolver.
        """
        if self.screen_bottom(camera_offset) < screen_height:
            self.y += gravity

        if self.right < 0:
            self.x = screen_width - self.width
        elif self.x > screen_width:
            self.x = 0.0

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
