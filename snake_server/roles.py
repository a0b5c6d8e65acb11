"""Player slot and spectator queue management."""

from __future__ import annotations

from collections import deque
import logging
from typing import Deque, List, Optional, Tuple

from .registry import Connection, Role

RoleChange = Tuple[Connection, Role]


class RoleScheduler:
    """Owns the single player slot and the FIFO of waiting spectators.

    Every method returns the role notices it produced, in the order they must
    be delivered. A notice is only emitted together with the role change it
    announces, so the role stored on a :class:`Connection` always matches the
    last notice that connection received.
    """

    def __init__(self) -> None:
        self.player: Optional[Connection] = None
        self.queue: Deque[Connection] = deque()

    def _assign(self, conn: Connection, role: Role, changes: List[RoleChange]) -> None:
        conn.role = role
        changes.append((conn, role))

    def _promote_next(self, changes: List[RoleChange]) -> None:
        if self.player is None and self.queue:
            self.player = self.queue.popleft()
            self._assign(self.player, Role.PLAYER, changes)
            logging.info("%s promoted to player", self.player.identity)

    def join(self, conn: Connection) -> List[RoleChange]:
        """Seat ``conn`` as player if the slot is free, else queue it."""

        changes: List[RoleChange] = []
        if conn.role is not Role.UNASSIGNED:
            return changes
        if self.player is None:
            self.player = conn
            self._assign(conn, Role.PLAYER, changes)
        else:
            self.queue.append(conn)
            self._assign(conn, Role.SPECTATOR, changes)
        return changes

    def rotate(self) -> List[RoleChange]:
        """Handle the end of the current player's run.

        With somebody waiting, the player goes to the back of the queue and the
        front of the queue takes over. Alone, the player keeps the slot and is
        told so again.
        """

        changes: List[RoleChange] = []
        current = self.player
        if current is None:
            return changes
        if self.queue:
            self.player = None
            self.queue.append(current)
            self._assign(current, Role.SPECTATOR, changes)
            self._promote_next(changes)
        else:
            self._assign(current, Role.PLAYER, changes)
        return changes

    def leave(self, conn: Connection) -> List[RoleChange]:
        """Forget ``conn``; safe to call for connections that never joined."""

        changes: List[RoleChange] = []
        if conn is self.player:
            self.player = None
            self._promote_next(changes)
        elif conn in self.queue:
            self.queue.remove(conn)
        return changes
