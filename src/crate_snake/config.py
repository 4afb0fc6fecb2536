"""Run configuration for the engine, the crate economy, and sessions."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from crate_snake.crates import DEFAULT_PALETTE
from crate_snake.errors import ConfigurationError
from crate_snake.grid import WallMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Board and actor setup for a :class:`~crate_snake.engine.GameEngine`."""

    width: int = 20
    height: int = 20
    initial_length: int = 3
    wall_mode: str = "death"
    food_count: int = 1
    respawn_food: bool = True
    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ConfigurationError("width and height must each be at least 4.")
        if self.initial_length < 1:
            raise ConfigurationError("initial_length must be at least 1.")
        # The body extends left from the center column.
        if self.initial_length > self.width // 2 + 1:
            raise ConfigurationError(
                "initial_length does not fit the grid; increase width or "
                "reduce initial_length."
            )
        if self.wall_mode not in {m.value for m in WallMode}:
            raise ConfigurationError(
                f"wall_mode must be one of {[m.value for m in WallMode]}."
            )
        if self.food_count < 1:
            raise ConfigurationError("food_count must be at least 1.")
        if not self.palette:
            raise ConfigurationError("palette must contain at least one color.")
        object.__setattr__(self, "palette", tuple(self.palette))

    @property
    def wall(self) -> WallMode:
        return WallMode(self.wall_mode)


@dataclass(frozen=True)
class CrateConfig:
    """Setup for the color crate economy."""

    crate_count: int = 4
    slots_per_crate: int = 3
    active_count: int = 2
    overflow_capacity: int = 5
    palette: tuple[str, ...] = DEFAULT_PALETTE
    deferred_completion: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "palette", tuple(self.palette))
        if self.crate_count < 1:
            raise ConfigurationError("crate_count must be at least 1.")
        if self.slots_per_crate < 1:
            raise ConfigurationError("slots_per_crate must be at least 1.")
        if not 1 <= self.active_count <= self.crate_count:
            raise ConfigurationError(
                "active_count must be between 1 and crate_count."
            )
        if self.overflow_capacity < 1:
            raise ConfigurationError("overflow_capacity must be at least 1.")
        distinct = len(dict.fromkeys(self.palette))
        if self.crate_count > distinct:
            raise ConfigurationError(
                f"crate_count {self.crate_count} exceeds the {distinct} "
                "distinct palette colors."
            )


@dataclass(frozen=True)
class SessionConfig:
    """Full configuration for a crate run. Supports JSON round-trips."""

    game: GameConfig = field(default_factory=GameConfig)
    crates: CrateConfig = field(default_factory=CrateConfig)
    seed: int | None = None

    def __post_init__(self) -> None:
        unreachable = set(self.crates.palette) - set(self.game.palette)
        if unreachable:
            raise ConfigurationError(
                "crate palette colors never spawn as pickups: "
                f"{sorted(unreachable)}."
            )

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        d["game"]["palette"] = list(self.game.palette)
        d["crates"]["palette"] = list(self.crates.palette)
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> SessionConfig:
        raw = dict(raw)
        game = GameConfig(**raw.pop("game", {}))
        crates = CrateConfig(**raw.pop("crates", {}))
        return cls(game=game, crates=crates, **raw)

    @classmethod
    def load(cls, path: str | Path) -> SessionConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
