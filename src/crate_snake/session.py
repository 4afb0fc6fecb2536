"""Run coordinator composing the movement engine and the crate economy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from crate_snake.config import SessionConfig
from crate_snake.crates import (
    Crate,
    apply_consumed_color,
    create_crates,
    finalize_crate_replacement,
)
from crate_snake.engine import GameEngine, GameSnapshot
from crate_snake.rng import RandomSource, default_source
from crate_snake.snake import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Engine snapshot plus copies of the crates and overflow."""

    game: GameSnapshot
    crates: tuple[Crate, ...]
    overflow: tuple[str, ...]
    completions: int
    total_completions: int
    game_over: bool

    @property
    def finished(self) -> bool:
        """True once either the economy or the engine has ended the run."""
        return self.game_over or self.game.status.terminal

    def to_dict(self) -> dict:
        return {
            "game": self.game.to_dict(),
            "crates": [crate.to_dict() for crate in self.crates],
            "overflow": list(self.overflow),
            "completions": self.completions,
            "total_completions": self.total_completions,
            "game_over": self.game_over,
        }


class CrateSession:
    """Owns one engine, its crates and its overflow for the length of a run.

    Every color the engine reports as consumed is fed into the economy in
    order. Once the overflow reaches capacity the session latches
    ``game_over`` and ignores further ticks until :meth:`reset`.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.rng = rng if rng is not None else default_source(self.config.seed)
        self.engine = GameEngine(self.config.game, rng=self.rng)
        self.crates: list[Crate] = []
        self.overflow: list[str] = []
        self.total_completions = 0
        self.game_over = False
        self._start_run()

    def _start_run(self) -> None:
        cfg = self.config.crates
        # The lists are refilled in place so callers holding them stay in sync.
        self.crates[:] = create_crates(
            cfg.crate_count,
            slots_per_crate=cfg.slots_per_crate,
            active_count=cfg.active_count,
            palette=cfg.palette,
            rng=self.rng,
        )
        self.overflow.clear()
        self.total_completions = 0
        self.game_over = False

    def reset(self) -> SessionSnapshot:
        """Start a new run on the same engine and containers."""
        self.engine.reset()
        self._start_run()
        logger.info("Session reset.")
        return self.snapshot()

    def set_direction(self, direction: Direction | str) -> None:
        self.engine.set_direction(direction)

    def tick(self) -> SessionSnapshot:
        """Advance the engine one step and settle consumed colors."""
        if self.game_over:
            return self.snapshot()
        state = self.engine.tick()
        return self.snapshot(self._feed(state.consumed_colors), state)

    def dash(self, steps: int = 3) -> SessionSnapshot:
        if self.game_over:
            return self.snapshot()
        state = self.engine.dash(steps)
        return self.snapshot(self._feed(state.consumed_colors), state)

    def shrink(self, amount: int = 1) -> SessionSnapshot:
        self.engine.shrink(amount)
        return self.snapshot()

    @property
    def completing(self) -> list[int]:
        """Indices of crates waiting for :meth:`finalize`."""
        return [i for i, crate in enumerate(self.crates) if crate.is_completing]

    def finalize(self, index: int) -> SessionSnapshot:
        """Commit the pending completion of the crate at *index*."""
        cfg = self.config.crates
        report = finalize_crate_replacement(
            self.crates[index],
            self.crates,
            self.overflow,
            overflow_capacity=cfg.overflow_capacity,
            palette=cfg.palette,
            rng=self.rng,
        )
        self.total_completions += report.completions
        return self.snapshot(report.completions)

    def finalize_all(self) -> SessionSnapshot:
        completions = 0
        for index in self.completing:
            completions += self.finalize(index).completions
        return self.snapshot(completions)

    def snapshot(
        self, completions: int = 0, state: GameSnapshot | None = None,
    ) -> SessionSnapshot:
        return SessionSnapshot(
            game=state if state is not None else self.engine.get_state(),
            crates=tuple(replace(crate) for crate in self.crates),
            overflow=tuple(self.overflow),
            completions=completions,
            total_completions=self.total_completions,
            game_over=self.game_over,
        )

    def _feed(self, colors: tuple[str, ...]) -> int:
        cfg = self.config.crates
        completions = 0
        for color in colors:
            report = apply_consumed_color(
                color,
                self.crates,
                self.overflow,
                active_count=cfg.active_count,
                overflow_capacity=cfg.overflow_capacity,
                palette=cfg.palette,
                rng=self.rng,
                deferred=cfg.deferred_completion,
            )
            completions += report.completions
            if report.game_over:
                self.game_over = True
                logger.info(
                    "Crate run over at tick %d with %d completion(s).",
                    self.engine.ticks,
                    self.total_completions + completions,
                )
                break
        self.total_completions += completions
        return completions
