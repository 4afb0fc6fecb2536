"""Colored pickup placement."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from crate_snake.rng import RandomSource, pick_index

if TYPE_CHECKING:
    from crate_snake.grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pickup:
    """An item on the board. Consumed when the actor's head enters its cell."""

    row: int
    col: int
    color: str

    @property
    def cell(self) -> tuple[int, int]:
        return self.row, self.col

    def moved_to(self, cell: tuple[int, int]) -> Pickup:
        return Pickup(cell[0], cell[1], self.color)

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "color": self.color}


class PickupSpawner:
    """Chooses cells and colors for new pickups.

    One draw picks the cell uniformly among empty cells (row-major), a second
    draw picks the color uniformly from the palette.
    """

    def __init__(
        self,
        grid: Grid,
        palette: Sequence[str],
        rng: RandomSource,
    ) -> None:
        if not palette:
            raise ValueError("Pickup palette must contain at least one color.")
        self.grid = grid
        self.palette = tuple(palette)
        self.rng = rng

    def random_color(self) -> str:
        return self.palette[pick_index(self.rng, len(self.palette))]

    def spawn(self, occupied: Iterable[tuple[int, int]]) -> Pickup | None:
        """Place one pickup on a cell outside *occupied*.

        Returns ``None`` when the board has no empty cell left.
        """
        empty = self.grid.empty_cells(occupied)
        if not empty:
            logger.warning("No empty cells available for pickup spawning.")
            return None
        row, col = empty[pick_index(self.rng, len(empty))]
        return Pickup(row, col, self.random_color())
