"""Runtime settings for a single game instance."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class GameSettings:
    """Board geometry and timing used by the game core.

    Defaults mirror :mod:`snake_server.constants`; tests build smaller boards
    or shorter cooldowns by passing explicit values.
    """

    grid_width: int = constants.GRID_WIDTH
    grid_height: int = constants.GRID_HEIGHT
    start_cell: tuple[int, int] = constants.START_CELL
    start_direction: tuple[int, int] = constants.START_DIRECTION
    tick_interval: float = constants.TICK_INTERVAL
    sabotage_cooldown: float = constants.SABOTAGE_COOLDOWN
    leaderboard_size: int = constants.LEADERBOARD_SIZE

    def __post_init__(self) -> None:
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise ValueError("Grid dimensions must be positive")
        x, y = self.start_cell
        if not (0 <= x < self.grid_width and 0 <= y < self.grid_height):
            raise ValueError("Start cell must lie inside the grid")
        if self.start_direction not in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            raise ValueError("Start direction must be a cardinal unit vector")
        if self.tick_interval <= 0:
            raise ValueError("Tick interval must be positive")
        if self.sabotage_cooldown < 0:
            raise ValueError("Sabotage cooldown cannot be negative")
        if self.leaderboard_size <= 0:
            raise ValueError("Leaderboard size must be positive")
