"""Tests for pickup placement."""

import pytest

from crate_snake.grid import Grid
from crate_snake.pickups import Pickup, PickupSpawner
from crate_snake.rng import constant_source, default_source


class TestPickup:
    def test_cell_and_move(self):
        pickup = Pickup(1, 2, "red")
        assert pickup.cell == (1, 2)
        moved = pickup.moved_to((1, 3))
        assert moved == Pickup(1, 3, "red")
        assert pickup.cell == (1, 2)

    def test_to_dict(self):
        assert Pickup(1, 2, "blue").to_dict() == {"row": 1, "col": 2, "color": "blue"}


class TestPickupSpawner:
    def test_requires_palette(self):
        with pytest.raises(ValueError, match="at least one color"):
            PickupSpawner(Grid(width=4, height=4), [], constant_source())

    def test_spawn_first_empty_cell_with_zero_draws(self):
        spawner = PickupSpawner(
            Grid(width=4, height=4), ["red", "blue"], constant_source(0.0),
        )
        assert spawner.spawn([(0, 0), (0, 1)]) == Pickup(0, 2, "red")

    def test_spawn_last_empty_cell_with_high_draws(self):
        spawner = PickupSpawner(
            Grid(width=4, height=4), ["red", "blue"], constant_source(0.99),
        )
        assert spawner.spawn([(3, 3)]) == Pickup(3, 2, "blue")

    def test_never_spawns_on_occupied_cell(self):
        grid = Grid(width=4, height=4)
        occupied = [(r, c) for r in range(4) for c in range(4) if (r, c) != (2, 1)]
        spawner = PickupSpawner(grid, ["red"], constant_source(0.75))
        assert spawner.spawn(occupied) == Pickup(2, 1, "red")

    def test_spawn_on_full_grid(self):
        grid = Grid(width=4, height=4)
        everything = [(r, c) for r in range(4) for c in range(4)]
        spawner = PickupSpawner(grid, ["red"], constant_source())
        assert spawner.spawn(everything) is None

    def test_spawn_deterministic(self):
        positions_a = self._spawn_with_seed(42)
        positions_b = self._spawn_with_seed(42)
        assert positions_a == positions_b

    @staticmethod
    def _spawn_with_seed(seed: int) -> list[Pickup]:
        spawner = PickupSpawner(
            Grid(width=10, height=10), ["red", "green"], default_source(seed),
        )
        return [spawner.spawn([]) for _ in range(5)]
