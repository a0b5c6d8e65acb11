"""Gameplay constants shared across the server modules."""

GRID_WIDTH: int = 20
GRID_HEIGHT: int = 20
START_CELL: tuple[int, int] = (10, 10)
START_DIRECTION: tuple[int, int] = (1, 0)
TICK_INTERVAL: float = 0.2
SABOTAGE_COOLDOWN: float = 60.0
LEADERBOARD_SIZE: int = 10
GUEST_PREFIX: str = "Guest-"
TOKEN_TTL_SECONDS: int = 3600
DEFAULT_PORT: int = 8080
DEFAULT_SCORES_FILE: str = "highscores.json"
