"""Tests for the CrateSession run coordinator."""

import json

from crate_snake.config import CrateConfig, SessionConfig
from crate_snake.engine import GameStatus
from crate_snake.pickups import Pickup
from crate_snake.rng import constant_source
from crate_snake.session import CrateSession


def _session(**crate_kwargs) -> CrateSession:
    config = SessionConfig(crates=CrateConfig(**crate_kwargs))
    return CrateSession(config, rng=constant_source(0.0))


class TestSessionInit:
    def test_initial_state(self):
        session = _session()
        snap = session.snapshot()
        assert [c.color for c in snap.crates] == ["yellow", "green", "purple", "blue"]
        assert snap.overflow == ()
        assert not snap.game_over
        assert snap.game.status == GameStatus.IDLE

    def test_seeded_sessions_match(self):
        a = CrateSession(SessionConfig(seed=9))
        b = CrateSession(SessionConfig(seed=9))
        assert a.snapshot() == b.snapshot()


class TestSessionTick:
    def test_matching_color_fills_crate(self):
        session = _session()
        session.engine.foods = [Pickup(10, 11, "yellow")]
        snap = session.tick()
        assert snap.game.score == 1
        assert snap.crates[0].filled == 1
        assert snap.completions == 0

    def test_unmatched_color_goes_to_overflow(self):
        session = _session()
        session.engine.foods = [Pickup(10, 11, "red")]
        assert session.tick().overflow == ("red",)

    def test_completion_counts(self):
        session = _session(slots_per_crate=1)
        session.engine.foods = [Pickup(10, 11, "yellow")]
        snap = session.tick()
        assert snap.completions == 1
        assert snap.total_completions == 1
        assert snap.crates[0].color == "red"
        assert snap.crates[0].just_completed

    def test_dash_feeds_every_color(self):
        session = _session()
        session.engine.foods = [Pickup(10, 11, "yellow"), Pickup(10, 12, "yellow")]
        snap = session.dash(2)
        assert snap.crates[0].filled == 2

    def test_shrink_passes_through(self):
        session = _session()
        assert len(session.shrink(2).game.snake) == 1


class TestSessionGameOver:
    def test_overflow_latches_game_over(self):
        session = _session(overflow_capacity=1)
        session.engine.foods = [Pickup(10, 11, "red")]
        snap = session.tick()
        assert snap.game_over
        assert snap.finished
        frozen = session.tick()
        assert frozen.game.tick == snap.game.tick
        assert frozen.game_over

    def test_reset_starts_fresh_run(self):
        session = _session(overflow_capacity=1)
        crates, overflow = session.crates, session.overflow
        session.engine.foods = [Pickup(10, 11, "red")]
        session.tick()
        snap = session.reset()
        assert not snap.game_over
        assert snap.overflow == ()
        assert snap.total_completions == 0
        assert snap.game.tick == 0
        assert session.crates is crates
        assert session.overflow is overflow

    def test_engine_death_finishes_run(self):
        session = _session()
        session.set_direction("up")
        for _ in range(11):
            snap = session.tick()
        assert snap.game.status == GameStatus.OVER
        assert snap.finished
        assert not snap.game_over


class TestSessionDeferred:
    def test_finalize_applies_pending_color(self):
        session = _session(slots_per_crate=1, deferred_completion=True)
        session.engine.foods = [Pickup(10, 11, "yellow")]
        snap = session.tick()
        assert snap.completions == 1
        assert session.completing == [0]
        assert snap.crates[0].pending_color == "red"
        snap = session.finalize(0)
        assert snap.crates[0].color == "red"
        assert session.completing == []

    def test_finalize_all(self):
        session = _session(slots_per_crate=1, deferred_completion=True)
        session.engine.foods = [Pickup(10, 11, "yellow")]
        session.tick()
        snap = session.finalize_all()
        assert not any(c.is_completing for c in snap.crates)
        assert snap.total_completions == 1


class TestSessionSnapshot:
    def test_snapshot_does_not_alias_crates(self):
        session = _session()
        snap = session.snapshot()
        session.crates[0].filled = 2
        session.overflow.append("red")
        assert snap.crates[0].filled == 0
        assert snap.overflow == ()

    def test_to_dict_is_json_serializable(self):
        session = _session()
        session.tick()
        assert isinstance(json.dumps(session.snapshot().to_dict()), str)
