"""Headless command-line driver for crate runs."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from crate_snake.config import CrateConfig, GameConfig, SessionConfig
from crate_snake.engine import GameSnapshot
from crate_snake.grid import WallMode
from crate_snake.snake import Direction

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crate-snake",
        description="Headless crate-snake simulation and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one run with a greedy autopilot.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON session config (flags override it).",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=500)
    sim_p.add_argument(
        "--deferred", action="store_true",
        help="Use two-phase crate completion, finalizing after each tick.",
    )
    _add_override_flags(sim_p)

    # --- config ---
    cfg_p = sub.add_parser("config", help="Write a session config to JSON.")
    cfg_p.add_argument("output", help="Destination path.")
    cfg_p.add_argument("--seed", type=int, default=None)
    _add_override_flags(cfg_p)

    return parser


def _add_override_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--grid-width", type=int, default=None)
    parser.add_argument("--grid-height", type=int, default=None)
    parser.add_argument(
        "--wall-mode", type=str, default=None,
        choices=[m.value for m in WallMode],
    )
    parser.add_argument("--food-count", type=int, default=None)
    parser.add_argument("--crates", type=int, default=None)
    parser.add_argument("--overflow-capacity", type=int, default=None)


def _resolve_config(args: argparse.Namespace) -> SessionConfig:
    config = (
        SessionConfig.load(args.config)
        if getattr(args, "config", None) else SessionConfig()
    )
    d = config.to_dict()
    game_flags = {
        "grid_width": "width",
        "grid_height": "height",
        "wall_mode": "wall_mode",
        "food_count": "food_count",
    }
    crate_flags = {
        "crates": "crate_count",
        "overflow_capacity": "overflow_capacity",
    }
    for cli_name, cfg_name in game_flags.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            d["game"][cfg_name] = val
    for cli_name, cfg_name in crate_flags.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            d["crates"][cfg_name] = val
    if getattr(args, "deferred", False):
        d["crates"]["deferred_completion"] = True
    if args.seed is not None:
        d["seed"] = args.seed
    return SessionConfig(
        game=GameConfig(**d["game"]),
        crates=CrateConfig(**d["crates"]),
        seed=d["seed"],
    )


def greedy_direction(state: GameSnapshot) -> Direction:
    """Head for the nearest pickup, avoiding walls and the body when possible."""
    head_r, head_c = state.head
    body = set(state.snake[:-1])
    targets = state.pickups
    if targets:
        target = min(
            targets,
            key=lambda p: abs(p.row - head_r) + abs(p.col - head_c),
        )
        prefs: list[Direction] = []
        if target.col < head_c:
            prefs.append(Direction.LEFT)
        elif target.col > head_c:
            prefs.append(Direction.RIGHT)
        if target.row < head_r:
            prefs.append(Direction.UP)
        elif target.row > head_r:
            prefs.append(Direction.DOWN)
    else:
        prefs = []
    prefs += [d for d in Direction if d not in prefs]

    for direction in prefs:
        if len(state.snake) > 1 and direction == state.direction.opposite:
            continue
        dr, dc = direction.value
        r, c = head_r + dr, head_c + dc
        if not (0 <= r < state.height and 0 <= c < state.width):
            continue
        if (r, c) in body:
            continue
        return direction
    return state.direction


def _run_simulate(args: argparse.Namespace) -> int:
    from crate_snake.session import CrateSession

    config = _resolve_config(args)
    session = CrateSession(config)
    snapshot = session.snapshot()
    for _ in range(args.max_ticks):
        session.set_direction(greedy_direction(snapshot.game))
        snapshot = session.tick()
        if session.completing:
            snapshot = session.finalize_all()
        if snapshot.finished:
            break

    summary = {
        "ticks": snapshot.game.tick,
        "score": snapshot.game.score,
        "status": snapshot.game.status.value,
        "length": len(snapshot.game.snake),
        "completions": snapshot.total_completions,
        "overflow": list(snapshot.overflow),
        "crate_game_over": snapshot.game_over,
    }
    print(json.dumps(summary, indent=2))  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    config.save(args.output)
    print(f"Wrote session config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``crate-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
