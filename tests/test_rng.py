"""Tests for injectable random sources."""

import pytest

from crate_snake.rng import (
    constant_source,
    default_source,
    pick_index,
    sequence_source,
)


class TestSources:
    def test_default_source_range(self):
        rng = default_source(0)
        values = [rng() for _ in range(100)]
        assert all(0.0 <= v < 1.0 for v in values)

    def test_default_source_seeded(self):
        a, b = default_source(7), default_source(7)
        assert [a() for _ in range(5)] == [b() for _ in range(5)]

    def test_constant_source(self):
        rng = constant_source(0.25)
        assert rng() == rng() == 0.25

    def test_constant_source_rejects_out_of_range(self):
        with pytest.raises(ValueError, match=r"\[0, 1\)"):
            constant_source(1.0)

    def test_sequence_source_cycles(self):
        rng = sequence_source([0.1, 0.2])
        assert [rng() for _ in range(5)] == [0.1, 0.2, 0.1, 0.2, 0.1]

    def test_sequence_source_needs_values(self):
        with pytest.raises(ValueError, match="at least one"):
            sequence_source([])


class TestPickIndex:
    def test_maps_draws_to_indices(self):
        assert pick_index(constant_source(0.0), 4) == 0
        assert pick_index(constant_source(0.5), 4) == 2
        assert pick_index(constant_source(0.999), 4) == 3

    def test_empty_range(self):
        with pytest.raises(ValueError, match="empty"):
            pick_index(constant_source(), 0)
