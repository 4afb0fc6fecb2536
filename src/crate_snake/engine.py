"""Tick-based movement engine with optional effect modifiers."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from crate_snake.config import GameConfig
from crate_snake.grid import Grid, WallMode
from crate_snake.pickups import Pickup, PickupSpawner
from crate_snake.rng import RandomSource, default_source, pick_index
from crate_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    """Lifecycle states of a run. ``over`` and ``won`` are terminal."""

    IDLE = "idle"
    RUNNING = "running"
    OVER = "over"
    WON = "won"

    @property
    def terminal(self) -> bool:
        return self in (GameStatus.OVER, GameStatus.WON)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of the engine state after a command.

    Holds tuples and frozen pickups only, so it stays valid however the
    engine moves on afterwards.
    """

    tick: int
    status: GameStatus
    score: int
    direction: Direction
    snake: tuple[tuple[int, int], ...]
    foods: tuple[Pickup, ...]
    extra_foods: tuple[Pickup, ...] = ()
    consumed: Pickup | None = None
    consumed_colors: tuple[str, ...] = ()
    extra_food_slots: int = 0
    magnet_radius: int = 0
    wall_bounce_active: bool = False
    width: int = 0
    height: int = 0

    @property
    def head(self) -> tuple[int, int]:
        return self.snake[0]

    @property
    def food(self) -> Pickup | None:
        """The first primary pickup, as in single-food play."""
        return self.foods[0] if self.foods else None

    @property
    def pickups(self) -> tuple[Pickup, ...]:
        return self.foods + self.extra_foods

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible primitives."""
        return {
            "tick": self.tick,
            "status": self.status.value,
            "score": self.score,
            "direction": self.direction.name.lower(),
            "snake": [list(cell) for cell in self.snake],
            "food": self.food.to_dict() if self.food else None,
            "foods": [p.to_dict() for p in self.foods],
            "extra_foods": [p.to_dict() for p in self.extra_foods],
            "consumed": self.consumed.to_dict() if self.consumed else None,
            "consumed_colors": list(self.consumed_colors),
            "extra_food_slots": self.extra_food_slots,
            "magnet_radius": self.magnet_radius,
            "wall_bounce_active": self.wall_bounce_active,
            "width": self.width,
            "height": self.height,
        }


class GameEngine:
    """Single-actor, tick-based game engine.

    The engine owns the grid, the actor and every pickup. Each call to
    :meth:`tick` advances the game by one step and returns a
    :class:`GameSnapshot`. All randomness is drawn from the injected
    ``rng`` source, so a fixed source makes every run reproducible.

    Within a tick, movement and pickup resolution happen first, then the
    magnet and extra-slot modifiers, then the win check.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: RandomSource | None = None,
        seed: int | None = None,
    ) -> None:
        self.rng = rng if rng is not None else default_source(seed)
        self.reset(config or GameConfig())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, config: GameConfig | None = None) -> GameSnapshot:
        """Start a fresh run, optionally with a new configuration.

        All state containers are replaced, and modifiers return to zero/off.
        """
        if config is not None:
            self.config = config
        cfg = self.config
        self.grid = Grid(width=cfg.width, height=cfg.height, wall_mode=cfg.wall)
        self.spawner = PickupSpawner(self.grid, cfg.palette, self.rng)

        start_row, start_col = self.grid.center
        self.snake = Snake(
            start_row, start_col, Direction.RIGHT, length=cfg.initial_length,
        )
        self._pending_direction = Direction.RIGHT

        self.status = GameStatus.IDLE
        self.score = 0
        self.ticks = 0
        self.extra_food_slots = 0
        self.magnet_radius = 0
        self.wall_bounce_active = False

        self.foods: list[Pickup] = []
        self.extra_foods: list[Pickup] = []
        self._consumed: Pickup | None = None
        self._consumed_colors: list[str] = []

        for _ in range(cfg.food_count):
            pickup = self.spawner.spawn(self._occupied())
            if pickup is None:
                break
            self.foods.append(pickup)
        self._sync_extra_foods()
        return self.get_state()

    def get_state(self) -> GameSnapshot:
        """Return a snapshot of the current state."""
        return GameSnapshot(
            tick=self.ticks,
            status=self.status,
            score=self.score,
            direction=self.snake.direction,
            snake=self.snake.cells(),
            foods=tuple(self.foods),
            extra_foods=tuple(self.extra_foods),
            consumed=self._consumed,
            consumed_colors=tuple(self._consumed_colors),
            extra_food_slots=self.extra_food_slots,
            magnet_radius=self.magnet_radius,
            wall_bounce_active=self.wall_bounce_active,
            width=self.grid.width,
            height=self.grid.height,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_direction(self, direction: Direction | str) -> None:
        """Buffer a direction for the next tick.

        Unknown names and 180° reversals of a multi-cell actor are ignored.
        The latest accepted request wins.
        """
        if not isinstance(direction, Direction):
            direction = Direction.from_name(direction)
            if direction is None:
                return
        if len(self.snake) > 1 and direction == self.snake.direction.opposite:
            return
        self._pending_direction = direction

    def tick(self) -> GameSnapshot:
        """Advance the game by one step."""
        self._consumed = None
        self._consumed_colors = []
        if self.status.terminal:
            return self.get_state()
        if self.status == GameStatus.IDLE:
            self.status = GameStatus.RUNNING

        direction = self._pending_direction
        self.snake.direction = direction
        next_cell = self.snake.next_head(direction)

        # --- boundary handling ---
        if not self.grid.in_bounds(*next_cell):
            mode = self._wall_mode()
            if mode == WallMode.WRAP:
                next_cell = self.grid.wrap(*next_cell)
            elif mode == WallMode.BOUNCE:
                bounce = self._bounce(direction)
                if bounce is None:
                    return self._end(GameStatus.OVER, "no room to bounce")
                direction, next_cell = bounce
                self._pending_direction = direction
            else:
                return self._end(GameStatus.OVER, "hit the wall")

        # --- growth decision, then collision against the real occupancy ---
        hit = self._pickup_at(next_cell)
        body = list(self.snake.body)
        removed_tail = None if hit is not None else body.pop()
        if next_cell in body:
            return self._end(GameStatus.OVER, "ran into itself")

        # --- commit ---
        self.snake.body.appendleft(next_cell)
        if removed_tail is not None:
            self.snake.body.pop()
        self.snake.direction = direction

        if hit is not None:
            source, pickup = hit
            self._consumed = pickup
            self._take(source, pickup)
            self._respawn(source)

        self._apply_magnet(removed_tail)
        self._sync_extra_foods()

        self.ticks += 1
        if not self.foods and not self.extra_foods:
            return self._end(GameStatus.WON, "cleared the board", advance=False)
        logger.debug(
            "Tick %d: head=%s score=%d", self.ticks, self.snake.head, self.score,
        )
        return self.get_state()

    def dash(self, steps: int = 3) -> GameSnapshot:
        """Run up to *steps* ticks as one burst.

        Stops early once the status leaves ``running``. The returned
        snapshot lists every color consumed during the burst.
        """
        if self.status.terminal:
            return self.get_state()
        colors: list[str] = []
        snapshot = self.get_state()
        for _ in range(max(1, int(steps))):
            snapshot = self.tick()
            colors.extend(snapshot.consumed_colors)
            if self.status != GameStatus.RUNNING:
                break
        return replace(snapshot, consumed_colors=tuple(colors))

    def shrink(self, amount: int = 1) -> GameSnapshot:
        """Cut up to *amount* segments off the tail, keeping at least the head."""
        segments = int(amount)
        if segments > 0:
            removed = self.snake.shrink(segments)
            logger.debug("Shrink removed %d segment(s).", removed)
        return self.get_state()

    def set_extra_food_slots(self, count: int) -> GameSnapshot:
        """Keep exactly *count* bonus pickups on the board when space allows."""
        self.extra_food_slots = max(0, int(count))
        del self.extra_foods[self.extra_food_slots:]
        self._sync_extra_foods()
        return self.get_state()

    def add_extra_food_slots(self, count: int = 1) -> GameSnapshot:
        slots = max(0, int(count))
        if slots == 0:
            return self.get_state()
        return self.set_extra_food_slots(self.extra_food_slots + slots)

    def clear_extra_food_slots(self) -> GameSnapshot:
        return self.set_extra_food_slots(0)

    def set_magnet_radius(self, radius: int = 0) -> GameSnapshot:
        self.magnet_radius = max(0, int(radius))
        return self.get_state()

    def set_wall_bounce_active(self, active: bool) -> GameSnapshot:
        self.wall_bounce_active = bool(active)
        return self.get_state()

    def place_preferred_food(
        self, candidates: list[tuple[int, int] | None],
    ) -> GameSnapshot:
        """Move the primary pickup to the first free cell in *candidates*.

        Falls back to the free cell nearest the grid center. The cell of the
        primary pickup itself counts as free.
        """
        current = self.foods[0] if self.foods else None
        occupied = [*self.snake.body]
        occupied += [p.cell for p in self.foods[1:]]
        occupied += [p.cell for p in self.extra_foods]
        empty = self.grid.empty_cells(occupied)
        if not empty:
            if current is not None:
                self.foods.pop(0)
            return self.get_state()

        free = set(empty)
        target = next(
            (
                tuple(c) for c in candidates
                if c is not None and tuple(c) in free
            ),
            None,
        )
        if target is None:
            target = self.grid.nearest_to_center(empty)

        color = current.color if current else self.spawner.random_color()
        placed = Pickup(target[0], target[1], color)
        if current is None:
            self.foods.insert(0, placed)
        else:
            self.foods[0] = placed
        return self.get_state()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _wall_mode(self) -> WallMode:
        if self.wall_bounce_active:
            return WallMode.BOUNCE
        return self.grid.wall_mode

    def _bounce(
        self, direction: Direction,
    ) -> tuple[Direction, tuple[int, int]] | None:
        """Deflect onto a random perpendicular that stays on the board."""
        options = direction.perpendiculars
        first = pick_index(self.rng, 2)
        for turn in (options[first], options[1 - first]):
            cell = self.snake.next_head(turn)
            if self.grid.in_bounds(*cell):
                logger.debug("Bounced %s off the wall.", turn.name.lower())
                return turn, cell
        return None

    def _occupied(self) -> set[tuple[int, int]]:
        cells = set(self.snake.body)
        cells.update(p.cell for p in self.foods)
        cells.update(p.cell for p in self.extra_foods)
        return cells

    def _pickup_at(
        self, cell: tuple[int, int],
    ) -> tuple[list[Pickup], Pickup] | None:
        for source in (self.foods, self.extra_foods):
            for pickup in source:
                if pickup.cell == cell:
                    return source, pickup
        return None

    def _take(self, source: list[Pickup], pickup: Pickup) -> None:
        """Score *pickup* and take it off the board."""
        self.score += 1
        self._consumed_colors.append(pickup.color)
        source.remove(pickup)

    def _respawn(self, source: list[Pickup]) -> None:
        # Extras are topped up by _sync_extra_foods at the end of the tick.
        if source is self.foods and self.config.respawn_food:
            replacement = self.spawner.spawn(self._occupied())
            if replacement is not None:
                self.foods.append(replacement)

    def _sync_extra_foods(self) -> None:
        while len(self.extra_foods) < self.extra_food_slots:
            pickup = self.spawner.spawn(self._occupied())
            if pickup is None:
                break
            self.extra_foods.append(pickup)

    def _apply_magnet(self, removed_tail: tuple[int, int] | None) -> None:
        """Pull pickups within ``magnet_radius`` one step toward the head.

        Primary pickups go first, then extras, each in list order. A pickup
        that reaches the head is eaten and the actor grows by one.
        """
        if self.magnet_radius == 0:
            return
        head = self.snake.head
        for source in (self.foods, self.extra_foods):
            for pickup in list(source):
                blocked = self._occupied() - {pickup.cell}
                target = self._attract(pickup.cell, head, blocked)
                if target is None:
                    continue
                if target == head:
                    self._take(source, pickup)
                    # Another pickup may have been pulled onto the vacated tail.
                    if removed_tail in self._occupied():
                        removed_tail = None
                    self.snake.grow_tail(removed_tail)
                    removed_tail = None
                    self._respawn(source)
                else:
                    source[source.index(pickup)] = pickup.moved_to(target)

    def _attract(
        self,
        cell: tuple[int, int],
        head: tuple[int, int],
        blocked: set[tuple[int, int]],
    ) -> tuple[int, int] | None:
        """Return the pickup's next cell, the head if it gets eaten, or None."""
        d_row = head[0] - cell[0]
        d_col = head[1] - cell[1]
        distance = abs(d_row) + abs(d_col)
        if distance == 0:
            return head
        if distance > self.magnet_radius:
            return None

        row_step = (d_row > 0) - (d_row < 0)
        col_step = (d_col > 0) - (d_col < 0)
        row_move = (cell[0] + row_step, cell[1]) if row_step else None
        col_move = (cell[0], cell[1] + col_step) if col_step else None
        # Larger offset first; columns win ties.
        if abs(d_col) >= abs(d_row):
            moves = (col_move, row_move)
        else:
            moves = (row_move, col_move)

        for move in moves:
            if move is None:
                continue
            if move == head:
                return head
            if move in blocked:
                continue
            return move
        return None

    def _end(
        self, status: GameStatus, reason: str, advance: bool = True,
    ) -> GameSnapshot:
        """Enter a terminal status and report it."""
        self.status = status
        if advance:
            self.ticks += 1
        logger.info(
            "Run %s at tick %d with score %d (%s).",
            status.value, self.ticks, self.score, reason,
        )
        return self.get_state()
