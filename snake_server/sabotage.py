"""Spectator obstacle placement."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .registry import Connection, Role
from .utils import Cell
from .world import World


class Sabotage:
    """Rate-limited obstacle placement for spectators.

    ``clock`` returns monotonic seconds and is injectable for tests.
    """

    def __init__(self, cooldown: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.cooldown = cooldown
        self.clock = clock

    def ready(self, conn: Connection, now: float) -> bool:
        if conn.last_sabotage is None:
            return True
        return now - conn.last_sabotage >= self.cooldown

    def place(self, conn: Connection, cell: Cell, world: World) -> bool:
        """Try to drop an obstacle on ``cell``; ``False`` means ignored.

        A refused placement never consumes the cooldown.
        """

        if conn.role is not Role.SPECTATOR:
            logging.debug("Ignoring block from %s with role %s", conn.identity, conn.role.value)
            return False
        now = self.clock()
        if not self.ready(conn, now):
            logging.debug("Ignoring block from %s inside cooldown", conn.identity)
            return False
        if not world.place_obstacle(cell):
            logging.debug("Ignoring block from %s at unusable cell %s", conn.identity, cell)
            return False
        conn.last_sabotage = now
        logging.info("%s placed a block at (%s, %s)", conn.identity, cell.x, cell.y)
        return True
