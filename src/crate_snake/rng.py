"""Injectable uniform random sources.

Every algorithm that needs randomness takes a :data:`RandomSource`, a
zero-argument callable returning a float in ``[0, 1)``. The default source
wraps a seeded NumPy generator; tests substitute fixed sequences.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from itertools import cycle

import numpy as np

RandomSource = Callable[[], float]


def default_source(seed: int | None = None) -> RandomSource:
    """Return a uniform ``[0, 1)`` source backed by ``np.random.default_rng``."""
    generator = np.random.default_rng(seed)

    def draw() -> float:
        return float(generator.random())

    return draw


def constant_source(value: float = 0.0) -> RandomSource:
    """Return a source that always yields *value*."""
    if not 0.0 <= value < 1.0:
        raise ValueError("Random source values must lie in [0, 1).")
    return lambda: value


def sequence_source(values: Iterable[float]) -> RandomSource:
    """Return a source that cycles through *values* forever."""
    pool = list(values)
    if not pool:
        raise ValueError("sequence_source needs at least one value.")
    if any(not 0.0 <= v < 1.0 for v in pool):
        raise ValueError("Random source values must lie in [0, 1).")
    it = cycle(pool)
    return lambda: next(it)


def pick_index(rng: RandomSource, size: int) -> int:
    """Map one draw from *rng* to an index in ``range(size)``."""
    if size < 1:
        raise ValueError("Cannot pick from an empty range.")
    return int(rng() * size) % size
