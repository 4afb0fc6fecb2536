"""Grid bounds, wall behaviour, and empty-cell queries."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np


class WallMode(enum.Enum):
    """Defines behaviour when the actor reaches the grid boundary."""

    DEATH = "death"
    WRAP = "wrap"
    BOUNCE = "bounce"


class Grid:
    """Fixed-size board with configurable wall mode.

    Occupancy is computed on demand as a NumPy boolean mask. Coordinates use
    (row, col) ordering consistent with NumPy indexing, and every cell listing
    is in row-major scan order.
    """

    def __init__(
        self,
        width: int = 20,
        height: int = 20,
        wall_mode: WallMode = WallMode.DEATH,
    ) -> None:
        if width < 4 or height < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.width = width
        self.height = height
        self.wall_mode = wall_mode

    @property
    def center(self) -> tuple[int, int]:
        return self.height // 2, self.width // 2

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= row < self.height and 0 <= col < self.width

    def wrap(self, row: int, col: int) -> tuple[int, int]:
        """Wrap coordinates around the grid edges."""
        return row % self.height, col % self.width

    def occupancy(self, occupied: Iterable[tuple[int, int]]) -> np.ndarray:
        """Return a ``(height, width)`` mask with occupied cells set."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for r, c in occupied:
            if self.in_bounds(r, c):
                mask[r, c] = True
        return mask

    def empty_cells(
        self, occupied: Iterable[tuple[int, int]],
    ) -> list[tuple[int, int]]:
        """Return all cells not in *occupied*, row-major."""
        rows, cols = np.nonzero(~self.occupancy(occupied))
        return list(zip(rows.tolist(), cols.tolist(), strict=True))

    def nearest_to_center(
        self, cells: list[tuple[int, int]],
    ) -> tuple[int, int] | None:
        """Pick the cell closest to the center by squared distance.

        Ties resolve to the earliest entry of *cells*.
        """
        if not cells:
            return None
        center_r, center_c = self.center
        coords = np.asarray(cells, dtype=np.int64)
        dist = (coords[:, 0] - center_r) ** 2 + (coords[:, 1] - center_c) ** 2
        return cells[int(np.argmin(dist))]
