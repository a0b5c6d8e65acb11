"""The game core: one world, its participants and the rules tying them together.

Every public method runs to completion synchronously and returns the
messages it produced as :class:`Delivery` objects, in send order. The
transport layer is expected to dispatch them before feeding the next event
in, which keeps clients from ever seeing a half-applied transition.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
import time
from typing import Callable, List, Optional

from .config import GameSettings
from .protocol import (
    ChangeDirection,
    ClientMessage,
    GameOver,
    GameState,
    Join,
    PlaceBlock,
    Reset,
    RoleAssignment,
    ServerMessage,
)
from .registry import Connection, ConnectionRegistry
from .roles import RoleChange, RoleScheduler
from .sabotage import Sabotage
from .scores import MemoryScoreStore, ScoreLedger
from .world import World


@dataclass(frozen=True)
class Delivery:
    """An outbound message and who gets it; ``recipient=None`` means everyone."""

    message: ServerMessage
    recipient: Optional[Connection] = None


class Game:
    """Owns the world, the connection registry and the role scheduler."""

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        ledger: Optional[ScoreLedger] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or GameSettings()
        self.world = World(self.settings, rng)
        self.registry = ConnectionRegistry()
        self.roles = RoleScheduler()
        self.sabotage = Sabotage(self.settings.sabotage_cooldown, clock)
        self.ledger = ledger or ScoreLedger(MemoryScoreStore(), self.settings.leaderboard_size)

    @property
    def player(self) -> Optional[Connection]:
        return self.roles.player

    # -- connection lifecycle ---------------------------------------------

    def connect(self, identity: str) -> Connection:
        conn = self.registry.register(identity)
        logging.info("%s connected as connection %s", identity, conn.id)
        return conn

    def disconnect(self, conn: Connection) -> List[Delivery]:
        """Clean up after a closed socket. Calling it twice is harmless."""

        if not self.registry.unregister(conn):
            return []
        logging.info("%s disconnected", conn.identity)
        deliveries = self._notices(self.roles.leave(conn))
        deliveries.append(self._broadcast_state())
        return deliveries

    # -- inbound messages -------------------------------------------------

    def handle(self, conn: Connection, message: ClientMessage) -> List[Delivery]:
        if conn not in self.registry:
            return []
        if isinstance(message, Join):
            return self._join(conn)
        if isinstance(message, ChangeDirection):
            return self._change_direction(conn, message)
        if isinstance(message, PlaceBlock):
            return self._place_block(conn, message)
        if isinstance(message, Reset):
            return self._reset(conn)
        raise TypeError(f"Unhandled client message {message!r}")

    def _join(self, conn: Connection) -> List[Delivery]:
        changes = self.roles.join(conn)
        if not changes:
            logging.debug("Ignoring repeated join from %s", conn.identity)
            return []
        logging.info("%s joined as %s", conn.identity, conn.role.value)
        deliveries = self._notices(changes)
        deliveries.append(self._broadcast_state())
        return deliveries

    def _change_direction(self, conn: Connection, message: ChangeDirection) -> List[Delivery]:
        if conn is not self.roles.player:
            logging.debug("Ignoring direction change from non-player %s", conn.identity)
            return []
        self.world.steer(message.direction)
        return []

    def _place_block(self, conn: Connection, message: PlaceBlock) -> List[Delivery]:
        if not self.sabotage.place(conn, message.cell, self.world):
            return []
        return [self._broadcast_state()]

    def _reset(self, conn: Connection) -> List[Delivery]:
        if conn is not self.roles.player:
            logging.debug("Ignoring reset from non-player %s", conn.identity)
            return []
        logging.info("%s reset the game", conn.identity)
        deliveries = self._notices(self.roles.rotate())
        self.world.reset()
        deliveries.append(self._broadcast_state())
        return deliveries

    # -- simulation -------------------------------------------------------

    def tick(self) -> List[Delivery]:
        """Advance the world one step; idle while nobody holds the player slot."""

        player = self.roles.player
        if player is None:
            return []
        result = self.world.step()
        deliveries: List[Delivery] = []
        if result.died:
            logging.info(
                "%s died (%s) with a session score of %d",
                player.identity,
                result.collision.value if result.collision else "unknown",
                player.session_score,
            )
            deliveries.append(Delivery(GameOver(), player))
            deliveries.extend(self._notices(self.roles.rotate()))
            self.world.reset()
        elif result.ate:
            player.session_score += 1
            self.ledger.record(player.identity, player.session_score)
        deliveries.append(self._broadcast_state())
        return deliveries

    # -- snapshots --------------------------------------------------------

    def snapshot(self) -> GameState:
        world = self.world.to_snapshot()
        return GameState(
            snake=world["snake"],
            obstacles=world["obstacles"],
            food=world["food"],
            roster=self.registry.roster(),
            leaderboard=self.ledger.leaderboard(),
        )

    def _broadcast_state(self) -> Delivery:
        return Delivery(self.snapshot())

    def _notices(self, changes: List[RoleChange]) -> List[Delivery]:
        return [Delivery(RoleAssignment(role), conn) for conn, role in changes]
