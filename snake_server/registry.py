"""Bookkeeping for every live connection."""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
import itertools
from typing import Dict, List, Optional

_id_counter = itertools.count(1)


class Role(str, enum.Enum):
    UNASSIGNED = "unassigned"
    PLAYER = "player"
    SPECTATOR = "spectator"


@dataclass(eq=False)
class Connection:
    """Game-side record of one authenticated socket.

    The socket itself lives in the server; everything the game needs to know
    about a participant is kept here.
    """

    identity: str
    role: Role = Role.UNASSIGNED
    last_sabotage: Optional[float] = None
    session_score: int = 0
    id: int = field(default_factory=lambda: next(_id_counter))

    def __repr__(self) -> str:
        return f"Connection(id={self.id}, identity={self.identity!r}, role={self.role.value})"


class ConnectionRegistry:
    """Owns the :class:`Connection` records, keyed by connection id."""

    def __init__(self) -> None:
        self._connections: Dict[int, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn: Connection) -> bool:
        return self._connections.get(conn.id) is conn

    def register(self, identity: str) -> Connection:
        conn = Connection(identity=identity)
        self._connections[conn.id] = conn
        return conn

    def unregister(self, conn: Connection) -> bool:
        """Drop ``conn``. Returns ``False`` if it was not registered."""

        return self._connections.pop(conn.id, None) is not None

    def connections(self) -> List[Connection]:
        """Return a stable copy of the live connections in registration order."""

        return list(self._connections.values())

    def roster(self) -> List[dict]:
        return [{"name": conn.identity, "role": conn.role.value} for conn in self._connections.values()]
