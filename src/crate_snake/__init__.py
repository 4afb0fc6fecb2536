"""Crate Snake — grid movement engine and color crate economy."""

from crate_snake.config import CrateConfig, GameConfig, SessionConfig
from crate_snake.crates import (
    DEFAULT_PALETTE,
    Crate,
    CrateReport,
    active_crate_colors,
    apply_consumed_color,
    create_crates,
    finalize_crate_replacement,
    pick_distinct_colors,
)
from crate_snake.engine import GameEngine, GameSnapshot, GameStatus
from crate_snake.errors import ConfigurationError, InvalidCallError
from crate_snake.grid import Grid, WallMode
from crate_snake.pickups import Pickup
from crate_snake.session import CrateSession, SessionSnapshot
from crate_snake.snake import Direction, Snake

__all__ = [
    "DEFAULT_PALETTE",
    "ConfigurationError",
    "Crate",
    "CrateConfig",
    "CrateReport",
    "CrateSession",
    "Direction",
    "GameConfig",
    "GameEngine",
    "GameSnapshot",
    "GameStatus",
    "Grid",
    "InvalidCallError",
    "Pickup",
    "SessionConfig",
    "SessionSnapshot",
    "Snake",
    "WallMode",
    "active_crate_colors",
    "apply_consumed_color",
    "create_crates",
    "finalize_crate_replacement",
    "pick_distinct_colors",
]
