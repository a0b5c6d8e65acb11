"""Translate local input into commands for the server."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Dict, Optional, Tuple

KEY_DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
    "w": (0, -1),
    "s": (0, 1),
    "a": (-1, 0),
    "d": (1, 0),
}


def direction_for_key(key_name: str) -> Optional[Tuple[int, int]]:
    """Map a key name such as ``"up"`` or ``"a"`` to a direction vector."""

    return KEY_DIRECTIONS.get(key_name.lower())


def cell_at(pixel: Tuple[int, int], cell_size: int, grid: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    """Return the board cell under ``pixel``, or ``None`` if it is off the board."""

    x, y = pixel[0] // cell_size, pixel[1] // cell_size
    if 0 <= x < grid[0] and 0 <= y < grid[1]:
        return x, y
    return None


@dataclass
class AbilityCooldown:
    """Local estimate of when the spectator may place the next block.

    The server remains authoritative; this only drives the on-screen timer.
    """

    duration: float
    clock: Callable[[], float] = time.monotonic
    _last_used: Optional[float] = None

    def remaining(self) -> float:
        if self._last_used is None:
            return 0.0
        return max(0.0, self.duration - (self.clock() - self._last_used))

    def ready(self) -> bool:
        return self.remaining() == 0.0

    def trigger(self) -> bool:
        if not self.ready():
            return False
        self._last_used = self.clock()
        return True
