"""
model.py — Model layer.

Owns ALL game state and rules. Zero rendering, zero input handling.
Exposes a clean API for the Controller to read/write.

Classes:
    Direction   — immutable (dx, dy) unit vector
    Snake       — body cells (head first) plus committed/pending direction
    Snapshot    — render-ready copy of the state after a tick
    GameModel   — the engine; owns snake, food, score and phase
"""

import logging
import random
from collections import deque
from typing import NamedTuple, Optional

from .config import (
    GRID_SIZE, ORIGIN, START_DIR, IDLE_FOOD,
    PHASE_IDLE, PHASE_RUNNING, PHASE_OVER,
)

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


# ─────────────────────────── Direction ───────────────────────────
class Direction:
    """Immutable 2-D unit direction."""
    LEFT  = None  # filled below after class definition
    RIGHT = None
    UP    = None
    DOWN  = None

    __slots__ = ("x", "y")

    def __init__(self, x: int, y: int):
        if abs(x) + abs(y) != 1:
            raise ValueError(f"not a unit direction: ({x}, {y})")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __setattr__(self, name, value):
        raise AttributeError("Direction is immutable")

    def is_opposite(self, other: "Direction") -> bool:
        return self.x == -other.x and self.y == -other.y

    def apply(self, cell: Cell) -> Cell:
        return (cell[0] + self.x, cell[1] + self.y)

    def as_tuple(self) -> Cell:
        return (self.x, self.y)

    def __eq__(self, other):
        return isinstance(other, Direction) and self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Direction({self.x}, {self.y})"


Direction.LEFT  = Direction(-1,  0)
Direction.RIGHT = Direction( 1,  0)
Direction.UP    = Direction( 0, -1)
Direction.DOWN  = Direction( 0,  1)


# ──────────────────────────── Snake ──────────────────────────────
class Snake:
    """
    Body cells and heading for the single snake.
    No rendering. No input handling. No rules about walls or food.
    """

    def __init__(self, body: list[Cell], direction: Direction):
        if not body:
            raise ValueError("snake needs at least one cell")
        self.body: deque[Cell] = deque(body)
        self.dir: Direction = direction
        self.next_dir: Direction = direction

    # ── Accessors ────────────────────────────────────────────────
    @property
    def head(self) -> Cell:
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    # ── Commands ─────────────────────────────────────────────────
    def request_direction(self, new_dir: Direction) -> bool:
        """Queue a direction change (rejected if it would reverse the snake)."""
        if new_dir.is_opposite(self.dir):
            return False
        self.next_dir = new_dir
        return True

    def commit_direction(self) -> Direction:
        self.dir = self.next_dir
        return self.dir

    def advance(self, new_head: Cell, grow: bool) -> None:
        self.body.appendleft(new_head)
        if not grow:
            self.body.pop()

    # ── Queries ──────────────────────────────────────────────────
    def occupies(self, cell: Cell) -> bool:
        return cell in self.body

    def cells(self) -> tuple[Cell, ...]:
        return tuple(self.body)


# ─────────────────────────── Snapshot ────────────────────────────
class Snapshot(NamedTuple):
    snake: tuple[Cell, ...]
    food: Cell
    score: int
    phase: str

    @property
    def game_over(self) -> bool:
        return self.phase == PHASE_OVER


# ─────────────────────────── GameModel ───────────────────────────
class GameModel:
    """
    Top-level model.  Owns all game state.
    The controller calls tick() once per timer period while running.
    """

    def __init__(self, grid_size: int = GRID_SIZE, rng: Optional[random.Random] = None):
        if grid_size < 1:
            raise ValueError(f"grid size must be positive, got {grid_size}")
        self.grid_size = grid_size
        self.rng = rng or random.Random()
        self.phase: str = PHASE_IDLE
        self.score: int = 0
        self.snake = Snake([ORIGIN], Direction(*START_DIR))
        self.food: Cell = IDLE_FOOD

    # ── Public API ───────────────────────────────────────────────
    @property
    def running(self) -> bool:
        return self.phase == PHASE_RUNNING

    @property
    def game_over(self) -> bool:
        return self.phase == PHASE_OVER

    @property
    def direction(self) -> Direction:
        return self.snake.dir

    @property
    def pending_direction(self) -> Direction:
        return self.snake.next_dir

    def start(self) -> bool:
        """Begin a fresh game. Does nothing while a game is running."""
        if self.running:
            return False
        self.snake = Snake([ORIGIN], Direction(*START_DIR))
        self.food = self._spawn_food()
        self.score = 0
        self.phase = PHASE_RUNNING
        logger.debug("game started, food at %s", self.food)
        return True

    def set_direction(self, new_dir: Direction) -> bool:
        if not self.running:
            return False
        return self.snake.request_direction(new_dir)

    def tick(self) -> Snapshot:
        """Advance the simulation by one cell."""
        if not self.running:
            return self.snapshot()

        direction = self.snake.commit_direction()
        new_head = direction.apply(self.snake.head)

        if not self._in_bounds(new_head):
            self._end("wall", new_head)
            return self.snapshot()
        if self.snake.occupies(new_head):
            self._end("self", new_head)
            return self.snapshot()

        ate = new_head == self.food
        self.snake.advance(new_head, grow=ate)
        if ate:
            self.score += 1
            self.food = self._spawn_food()
            logger.debug("food eaten at %s, score %d, next food %s",
                         new_head, self.score, self.food)
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        return Snapshot(self.snake.cells(), self.food, self.score, self.phase)

    # ── Private helpers ──────────────────────────────────────────
    def _in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def _spawn_food(self) -> Cell:
        # Snake cells are not excluded; food may land under the body.
        return (
            self.rng.randrange(self.grid_size),
            self.rng.randrange(self.grid_size),
        )

    def _end(self, cause: str, cell: Cell) -> None:
        self.phase = PHASE_OVER
        logger.info("game over (%s collision at %s), score %d", cause, cell, self.score)
