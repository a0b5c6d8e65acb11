"""Authoritative game world simulation."""

from __future__ import annotations

from dataclasses import dataclass
import enum
import random
from typing import Optional, Set

from . import collision
from .config import GameSettings
from .food import spawn_food
from .snake import Snake
from .utils import Cell


class TickOutcome(enum.Enum):
    MOVED = "moved"
    ATE = "ate"
    DIED = "died"


@dataclass(frozen=True)
class TickResult:
    """What a single :meth:`World.step` did to the board."""

    outcome: TickOutcome
    collision: Optional[collision.Collision] = None

    @property
    def died(self) -> bool:
        return self.outcome is TickOutcome.DIED

    @property
    def ate(self) -> bool:
        return self.outcome is TickOutcome.ATE


class World:
    """Holds the snake, obstacles and food and advances them one tick at a time.

    The world never reallocates its containers: :meth:`reset` clears and
    refills them so anything holding a reference keeps seeing live state.
    A collision leaves the board untouched; the caller decides when to
    :meth:`reset`.
    """

    def __init__(self, settings: GameSettings, rng: Optional[random.Random] = None) -> None:
        self.width = settings.grid_width
        self.height = settings.grid_height
        self.rng = rng or random.Random()
        self.snake = Snake(start=Cell(*settings.start_cell), start_direction=Cell(*settings.start_direction))
        self.obstacles: Set[Cell] = set()
        self.food: Optional[Cell] = None
        self.spawn_food()

    def spawn_food(self) -> None:
        self.food = spawn_food(self.width, self.height, self.snake, self.obstacles, self.rng)

    def steer(self, direction: Cell) -> None:
        self.snake.steer(direction)

    def can_place_obstacle(self, cell: Cell) -> bool:
        """Return ``True`` if a spectator may block ``cell`` right now.

        Cells off the board, the food cell and cells that are already blocked
        are refused.
        """

        if not cell.inside(self.width, self.height):
            return False
        if cell == self.food:
            return False
        return cell not in self.obstacles

    def place_obstacle(self, cell: Cell) -> bool:
        if not self.can_place_obstacle(cell):
            return False
        self.obstacles.add(cell)
        return True

    def step(self) -> TickResult:
        """Advance the snake by one cell and report what happened."""

        new_head = self.snake.next_head()
        hit = collision.detect_collision(new_head, self.snake, self.obstacles, self.width, self.height)
        if hit is not None:
            return TickResult(TickOutcome.DIED, hit)

        ate = new_head == self.food
        self.snake.advance(new_head, grow=ate)
        if ate:
            self.spawn_food()
            return TickResult(TickOutcome.ATE)
        return TickResult(TickOutcome.MOVED)

    def reset(self) -> None:
        """Clear obstacles, respawn the snake and place fresh food."""

        self.obstacles.clear()
        self.snake.respawn()
        self.spawn_food()

    def to_snapshot(self) -> dict:
        return {
            "snake": self.snake.to_snapshot(),
            "obstacles": [cell.to_dict() for cell in sorted(self.obstacles, key=Cell.to_tuple)],
            "food": self.food.to_dict() if self.food is not None else None,
        }
