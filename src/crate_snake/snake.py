"""Actor representation and movement primitives."""

from __future__ import annotations

import enum
from collections import deque


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def perpendiculars(self) -> tuple[Direction, Direction]:
        """The two directions at right angles, in a fixed order."""
        if self in (Direction.UP, Direction.DOWN):
            return Direction.LEFT, Direction.RIGHT
        return Direction.UP, Direction.DOWN

    @classmethod
    def from_name(cls, name: str) -> Direction | None:
        """Parse ``"up"``, ``"Left"`` etc. Returns ``None`` for unknown names."""
        if not isinstance(name, str):
            return None
        return cls.__members__.get(name.strip().upper())


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """The actor, an ordered deque of (row, col) cells.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        start_row: int,
        start_col: int,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dr, dc = direction.value
        self.body: deque[tuple[int, int]] = deque()
        for i in range(length):
            self.body.append((start_row - dr * i, start_col - dc * i))
        self.direction = direction

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> tuple[int, int]:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def tail(self) -> tuple[int, int]:
        return self.body[-1]

    def next_head(self, direction: Direction | None = None) -> tuple[int, int]:
        """Compute the next head position without moving."""
        dr, dc = (direction or self.direction).value
        r, c = self.head
        return r + dr, c + dc

    def grow_tail(self, removed_tail: tuple[int, int] | None = None) -> None:
        """Lengthen by one at the tail end.

        Re-attaches *removed_tail* when the step just vacated it, otherwise
        duplicates the current tail so the new segment trails next tick.
        """
        self.body.append(removed_tail if removed_tail is not None else self.tail)

    def shrink(self, amount: int) -> int:
        """Drop up to *amount* tail segments, never the head.

        Returns how many segments were removed.
        """
        removed = 0
        while removed < amount and len(self.body) > 1:
            self.body.pop()
            removed += 1
        return removed

    def cells(self) -> tuple[tuple[int, int], ...]:
        return tuple(self.body)
