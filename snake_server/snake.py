"""Snake entity implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .utils import Cell


@dataclass
class Snake:
    """Authoritative grid snake steered by the current player.

    ``body`` is ordered head first. The list object is never replaced so
    references handed out before a reset keep pointing at the live body.
    """

    start: Cell
    start_direction: Cell
    body: List[Cell] = field(default_factory=list)
    direction: Cell = field(init=False)

    def __post_init__(self) -> None:
        self.direction = self.start_direction
        self.respawn()

    @property
    def head(self) -> Cell:
        return self.body[0]

    def steer(self, direction: Cell) -> None:
        """Set the heading used on the next tick."""

        self.direction = direction

    def next_head(self) -> Cell:
        """Return the cell the head will move into on the next tick."""

        return self.head + self.direction

    def occupies(self, cell: Cell) -> bool:
        return cell in self.body

    def advance(self, new_head: Cell, grow: bool) -> None:
        """Move the head into ``new_head``; keep the tail when ``grow``."""

        self.body.insert(0, new_head)
        if not grow:
            self.body.pop()

    def respawn(self) -> None:
        """Return to the single-cell starting snake and heading."""

        self.body.clear()
        self.body.append(self.start)
        self.direction = self.start_direction

    def to_snapshot(self) -> list[dict[str, int]]:
        """Return the body as a list of ``{"x", "y"}`` dictionaries."""

        return [cell.to_dict() for cell in self.body]
