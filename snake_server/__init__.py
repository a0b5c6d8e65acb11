"""Server package for the snake sabotage game."""

__all__ = [
    "auth",
    "collision",
    "config",
    "constants",
    "food",
    "game",
    "main",
    "protocol",
    "registry",
    "roles",
    "sabotage",
    "scores",
    "snake",
    "utils",
    "world",
]
