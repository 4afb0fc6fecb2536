"""Color crate economy.

Crates are filled with pickups of their own color. Pickups that match no
active crate go to a bounded overflow list (the "trash"); reaching its
capacity ends the run. A full crate completes: it takes a fresh color that no
other crate uses, empties, and reclaims matching colors from the overflow,
newest first, which may complete it again.

Completion is resolved in two phases. :func:`apply_consumed_color` decides
the replacement color and marks the crate ``is_completing``;
:func:`finalize_crate_replacement` commits it and pulls from the overflow.
The default single-step mode runs both phases back to back so presentation
layers that do not animate never see an intermediate state.

The crate list and overflow list belong to the caller and are mutated in
place; every function returns a :class:`CrateReport` summary.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass

from crate_snake.errors import ConfigurationError, InvalidCallError
from crate_snake.rng import RandomSource, default_source, pick_index

logger = logging.getLogger(__name__)

DEFAULT_PALETTE: tuple[str, ...] = (
    "red", "yellow", "green", "purple", "blue", "orange",
)


@dataclass
class Crate:
    """A fixed-capacity container that accepts one color at a time."""

    color: str
    capacity: int
    filled: int = 0
    locked: bool = False
    just_completed: bool = False
    is_completing: bool = False
    pending_color: str | None = None

    @property
    def is_full(self) -> bool:
        return self.filled >= self.capacity

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CrateReport:
    """Outcome of one economy call."""

    completions: int = 0
    game_over: bool = False


def pick_distinct_colors(
    count: int,
    palette: Sequence[str] = DEFAULT_PALETTE,
    rng: RandomSource | None = None,
) -> list[str]:
    """Draw *count* distinct colors with a Fisher-Yates shuffle."""
    rng = rng if rng is not None else default_source()
    pool = list(dict.fromkeys(palette))
    if count < 0:
        raise ConfigurationError(f"Cannot pick a negative number of colors ({count}).")
    if count > len(pool):
        raise ConfigurationError(
            f"Cannot pick {count} distinct colors from a palette of {len(pool)}."
        )
    for i in range(len(pool) - 1, 0, -1):
        j = pick_index(rng, i + 1)
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:count]


def create_crates(
    count: int,
    slots_per_crate: int = 3,
    active_count: int = 2,
    palette: Sequence[str] = DEFAULT_PALETTE,
    rng: RandomSource | None = None,
) -> list[Crate]:
    """Create *count* empty crates with distinct colors.

    Crates at index ``active_count`` and beyond start locked.
    """
    if slots_per_crate < 1:
        raise ConfigurationError("slots_per_crate must be at least 1.")
    colors = pick_distinct_colors(count, palette, rng)
    return [
        Crate(color=color, capacity=slots_per_crate, locked=i >= active_count)
        for i, color in enumerate(colors)
    ]


def active_crate_colors(crates: list[Crate], active_count: int = 2) -> list[str]:
    return [crate.color for crate in crates[:active_count]]


def apply_consumed_color(
    color: str,
    crates: list[Crate],
    overflow: list[str],
    *,
    active_count: int = 2,
    overflow_capacity: int = 5,
    palette: Sequence[str] = DEFAULT_PALETTE,
    rng: RandomSource | None = None,
    deferred: bool = False,
) -> CrateReport:
    """Route one consumed *color* into a crate or the overflow.

    The first active crate (lowest index) of that color with free space and
    no pending completion takes it; otherwise the color is appended to
    *overflow*. With ``deferred=True`` a completion stops after choosing the
    replacement color and must be committed later with
    :func:`finalize_crate_replacement`. Otherwise the replacement, overflow
    pull and any chained completions are resolved here, and ``completions``
    counts all of them.
    """
    if not color:
        raise InvalidCallError("apply_consumed_color requires a color.")
    _check_containers(crates, overflow)
    rng = rng if rng is not None else default_source()

    for crate in crates:
        crate.just_completed = False

    target = next(
        (
            crate for crate in crates[:active_count]
            if crate.color == color
            and not crate.is_completing
            and crate.filled < crate.capacity
        ),
        None,
    )

    if target is None:
        overflow.append(color)
        game_over = len(overflow) >= overflow_capacity
        logger.debug("Color %s sent to overflow (%d/%d).",
                     color, len(overflow), overflow_capacity)
        if game_over:
            logger.info("Overflow full (%d/%d); run over.",
                        len(overflow), overflow_capacity)
        return CrateReport(completions=0, game_over=game_over)

    target.filled += 1
    if target.filled < target.capacity:
        return CrateReport(
            completions=0, game_over=len(overflow) >= overflow_capacity,
        )

    _begin_completion(target, crates, palette, rng)
    completions = 1
    if not deferred:
        # Each repeat completion drains `capacity` entries from the finite
        # overflow, so this loop terminates.
        while target.is_completing:
            report = finalize_crate_replacement(
                target, crates, overflow,
                overflow_capacity=overflow_capacity, palette=palette, rng=rng,
            )
            completions += report.completions
        target.just_completed = True

    return CrateReport(
        completions=completions, game_over=len(overflow) >= overflow_capacity,
    )


def finalize_crate_replacement(
    crate: Crate,
    crates: list[Crate],
    overflow: list[str],
    *,
    overflow_capacity: int = 5,
    palette: Sequence[str] = DEFAULT_PALETTE,
    rng: RandomSource | None = None,
) -> CrateReport:
    """Commit a pending completion on *crate*.

    Applies ``pending_color``, empties the crate and pulls matching colors
    from *overflow*. If the pull fills the crate again, a new completion is
    started (reported as one completion) and needs another finalize call.
    A crate that is not completing is left untouched.
    """
    if crate is None:
        raise InvalidCallError("finalize_crate_replacement requires a crate.")
    _check_containers(crates, overflow)
    if not any(c is crate for c in crates):
        raise InvalidCallError("crate is not part of the given crate list.")

    if not crate.is_completing or crate.pending_color is None:
        return CrateReport(
            completions=0, game_over=len(overflow) >= overflow_capacity,
        )

    rng = rng if rng is not None else default_source()
    crate.color = crate.pending_color
    crate.pending_color = None
    crate.is_completing = False
    crate.just_completed = False
    crate.filled = 0

    pulled = _pull_from_overflow(overflow, crate)
    logger.debug("Crate now %s; pulled %d from overflow.", crate.color, pulled)

    completions = 0
    if crate.is_full:
        _begin_completion(crate, crates, palette, rng)
        completions = 1
    return CrateReport(
        completions=completions, game_over=len(overflow) >= overflow_capacity,
    )


def _check_containers(crates: object, overflow: object) -> None:
    if not isinstance(crates, list):
        raise InvalidCallError("crates must be a list of Crate objects.")
    if not isinstance(overflow, list):
        raise InvalidCallError("overflow must be a list of colors.")


def _begin_completion(
    crate: Crate,
    crates: list[Crate],
    palette: Sequence[str],
    rng: RandomSource,
) -> None:
    crate.just_completed = True
    crate.is_completing = True
    crate.pending_color = _choose_replacement_color(crates, palette, rng)
    logger.info("Crate %s completed; next color %s.",
                crate.color, crate.pending_color)


def _choose_replacement_color(
    crates: list[Crate],
    palette: Sequence[str],
    rng: RandomSource,
) -> str:
    """Pick uniformly among palette colors no crate holds or awaits."""
    used = {crate.color for crate in crates}
    used.update(c.pending_color for c in crates if c.pending_color is not None)
    candidates = [color for color in dict.fromkeys(palette) if color not in used]
    if not candidates:
        logger.warning(
            "No free palette color for a replacement crate; "
            "a crate color may repeat until the next completion."
        )
        return palette[pick_index(rng, len(palette))]
    return candidates[pick_index(rng, len(candidates))]


def _pull_from_overflow(overflow: list[str], crate: Crate) -> int:
    """Move colors matching *crate* out of *overflow*, newest first."""
    moved = 0
    for i in range(len(overflow) - 1, -1, -1):
        if crate.filled >= crate.capacity:
            break
        if overflow[i] != crate.color:
            continue
        del overflow[i]
        crate.filled += 1
        moved += 1
    return moved
