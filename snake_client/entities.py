"""Client side view of the game mirroring the server state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Cell = Tuple[int, int]


@dataclass
class RosterEntry:
    name: str
    role: str


@dataclass
class ScoreEntry:
    name: str
    score: int


def _cells(payload: List[dict]) -> List[Cell]:
    return [(int(item["x"]), int(item["y"])) for item in payload]


@dataclass
class GameView:
    """Everything the renderer needs, rebuilt from each server message.

    Snapshots are complete, so applying one simply replaces the previous
    board.
    """

    role: str = "unassigned"
    snake: List[Cell] = field(default_factory=list)
    obstacles: List[Cell] = field(default_factory=list)
    food: Optional[Cell] = None
    roster: List[RosterEntry] = field(default_factory=list)
    leaderboard: List[ScoreEntry] = field(default_factory=list)
    game_over: bool = False

    def apply(self, message: dict) -> None:
        kind = message.get("type")
        if kind == "roleAssignment":
            self.role = str(message.get("role", self.role))
        elif kind == "updateGameState":
            self.update_from_snapshot(message.get("state", {}))
        elif kind == "gameOver":
            self.game_over = True

    def update_from_snapshot(self, state: dict) -> None:
        self.snake = _cells(state.get("snake", []))
        self.obstacles = _cells(state.get("obstacles", []))
        food = state.get("food")
        self.food = (int(food["x"]), int(food["y"])) if food else None
        self.roster = [RosterEntry(str(entry["name"]), str(entry["role"])) for entry in state.get("roster", [])]
        self.leaderboard = [
            ScoreEntry(str(entry["name"]), int(entry["score"])) for entry in state.get("leaderboard", [])
        ]

    def acknowledge_game_over(self) -> None:
        self.game_over = False
