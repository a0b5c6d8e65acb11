"""Grid primitives used by the authoritative game server."""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Cell:
    """An integer grid coordinate.

    Cells double as direction vectors: adding a cardinal unit ``Cell`` to a
    position yields the neighbouring position. Instances are immutable and
    hashable so they can live in sets and be shared between snapshots.
    """

    x: int
    y: int

    def __add__(self, other: "Cell") -> "Cell":
        return Cell(self.x + other.x, self.y + other.y)

    def inside(self, width: int, height: int) -> bool:
        """Return ``True`` if the cell lies on a ``width`` x ``height`` board."""

        return 0 <= self.x < width and 0 <= self.y < height

    def to_dict(self) -> dict[str, int]:
        """Serialise the cell to a JSON friendly dictionary."""

        return {"x": self.x, "y": self.y}

    def to_tuple(self) -> tuple[int, int]:
        return self.x, self.y


UP = Cell(0, -1)
DOWN = Cell(0, 1)
LEFT = Cell(-1, 0)
RIGHT = Cell(1, 0)
CARDINALS = (UP, DOWN, LEFT, RIGHT)


def is_cardinal(direction: Cell) -> bool:
    """Return ``True`` if ``direction`` is one of the four unit vectors."""

    return direction in CARDINALS


def iter_grid(width: int, height: int) -> Iterator[Cell]:
    """Yield every cell of the board in row-major order."""

    for y in range(height):
        for x in range(width):
            yield Cell(x, y)


def random_free_cell(
    width: int, height: int, occupied: Iterable[Cell], rng: random.Random
) -> Optional[Cell]:
    """Return a uniformly random cell that is not in ``occupied``.

    Free cells are enumerated up front so the cost is bounded by the board
    size even when the board is nearly full. ``None`` means no cell is free.
    """

    blocked = set(occupied)
    free: List[Cell] = [cell for cell in iter_grid(width, height) if cell not in blocked]
    if not free:
        return None
    return rng.choice(free)
