"""
Stack
=====

Ordered collection of settled pandas, in landing order.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from panda_stack.core.entity import Entity


class Stack:
    """
    The tower of settled pandas.

    Entries are kept in landing order and never move once appended.
    """

    def __init__(self):
        self._entities: List[Entity] = []

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __bool__(self) -> bool:
        return bool(self._entities)

    @property
    def entities(self) -> List[Entity]:
        """Copy of the settled pandas, earliest first."""
        return list(self._entities)

    @property
    def top(self) -> Optional[Entity]:
        """Most recently landed panda."""
        return self._entities[-1] if self._entities else None

    def most_recent_first(self) -> Iterator[Entity]:
        """Iterate from the latest landing back to the first."""
        return reversed(self._entities)

    def append(self, entity: Entity) -> None:
        self._entities.append(entity)

    def clear(self) -> None:
        self._entities.clear()

    def row_occupant(
        self,
        row_y: float,
        probe: Entity,
        exclude_uid: Optional[int] = None
    ) -> Optional[Entity]:
        """
        Find a settled panda at exactly row_y whose x-range overlaps the probe.

        Args:
            row_y: Row (top y) to inspect.
            probe: Panda whose horizontal footprint is tested.
            exclude_uid: Panda to ignore (the landing support).

        Returns:
            The first occupant found, or None.
        """
        for other in self._entities:
            if other.uid == exclude_uid:
                continue
            if other.y == row_y and probe.overlaps_x(other):
                return other
        return None

    def height(self, entity_height: float) -> float:
        """
        Vertical extent of the tower over distinct occupied rows.

        Pandas sharing a row count once.
        """
        if not self._entities:
            return 0.0
        rows = {e.y for e in self._entities}
        return max(rows) - min(rows) + entity_height

    @property
    def row_count(self) -> int:
        """Number of distinct occupied rows."""
        return len({e.y for e in self._entities})
