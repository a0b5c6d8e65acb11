"""Entry point for the asyncio based game server."""

from __future__ import annotations

import argparse
import asyncio
from http import HTTPStatus
import logging
import os
import secrets
from typing import Dict, Iterable, Optional, Set
import uuid

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosed
from websockets.frames import CloseCode
from websockets.http11 import Request, Response

from . import auth, constants, protocol
from .config import GameSettings
from .game import Delivery, Game
from .scores import JsonScoreStore, ScoreLedger


class GameServer:
    """High level orchestration of the game core and websocket IO."""

    def __init__(self, host: str, port: int, game: Game, identities: auth.IdentityProvider) -> None:
        self.host = host
        self.port = port
        self.game = game
        self.identities = identities
        self.clients: Dict[int, ServerConnection] = {}
        self._pending: Dict[uuid.UUID, str] = {}
        self._cleanups: Set[asyncio.Task[None]] = set()

    def serve(self):
        """Return the websocket server context manager without starting ticks."""

        return serve(self._handle_client, self.host, self.port, process_request=self._authenticate)

    async def start(self) -> None:
        """Start the websocket server and the game loop."""

        async with self.serve():
            logging.info("Server listening on %s:%s", self.host, self.port)
            await self._run_game_loop()

    async def _run_game_loop(self) -> None:
        tick_interval = self.game.settings.tick_interval
        while True:
            self.run_tick()
            await asyncio.sleep(tick_interval)

    def run_tick(self) -> None:
        self._deliver(self.game.tick())

    def _deliver(self, deliveries: Iterable[Delivery]) -> None:
        # broadcast() is synchronous: the whole batch is queued before the next event runs.
        for delivery in deliveries:
            payload = protocol.encode(delivery.message)
            if delivery.recipient is None:
                broadcast(list(self.clients.values()), payload)
                continue
            websocket = self.clients.get(delivery.recipient.id)
            if websocket is not None:
                broadcast([websocket], payload)

    async def _authenticate(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        try:
            token, guest = auth.credentials_from_request(request.path, request.headers)
        except ValueError:
            identity = None
        else:
            identity = await auth.authenticate(self.identities, token, guest)
        if identity is None:
            logging.info("Refused connection from %s", connection.remote_address)
            return connection.respond(HTTPStatus.UNAUTHORIZED, "Unauthorized\n")
        self._pending[connection.id] = identity
        # The handshake can still fail after this point, in which case no handler runs.
        task = asyncio.create_task(self._forget_when_closed(connection))
        self._cleanups.add(task)
        task.add_done_callback(self._cleanups.discard)
        return None

    async def _forget_when_closed(self, connection: ServerConnection) -> None:
        await connection.wait_closed()
        self._pending.pop(connection.id, None)

    async def _handle_client(self, websocket: ServerConnection) -> None:
        identity = self._pending.pop(websocket.id, None)
        if identity is None:
            await websocket.close(CloseCode.POLICY_VIOLATION, "unauthenticated")
            return
        conn = self.game.connect(identity)
        self.clients[conn.id] = websocket
        try:
            async for message in websocket:
                try:
                    payload = protocol.parse_client_message(message)
                except ValueError as exc:
                    logging.debug("Dropping message from %s: %s", identity, exc)
                    continue
                self._deliver(self.game.handle(conn, payload))
        except ConnectionClosed:
            logging.info("Connection %s from %s closed abruptly", conn.id, identity)
        finally:
            self.clients.pop(conn.id, None)
            self._deliver(self.game.disconnect(conn))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the snake sabotage server")
    parser.add_argument("--host", default=os.environ.get("SNAKE_HOST", "0.0.0.0"), help="Host interface to bind to")
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("SNAKE_PORT", constants.DEFAULT_PORT)), help="Port to listen on"
    )
    parser.add_argument(
        "--scores",
        default=os.environ.get("SNAKE_SCORES_FILE", constants.DEFAULT_SCORES_FILE),
        help="JSON file holding the leaderboard",
    )
    parser.add_argument("--tick-interval", type=float, default=constants.TICK_INTERVAL, help="Seconds per tick")
    parser.add_argument(
        "--cooldown", type=float, default=constants.SABOTAGE_COOLDOWN, help="Seconds between a spectator's blocks"
    )
    parser.add_argument("--grid-width", type=int, default=constants.GRID_WIDTH)
    parser.add_argument("--grid-height", type=int, default=constants.GRID_HEIGHT)
    parser.add_argument("--issue-token", metavar="NAME", help="Print a signed token for NAME and exit")
    return parser.parse_args(argv)


def load_secret() -> str:
    secret = os.environ.get("SNAKE_JWT_SECRET")
    if secret:
        return secret
    logging.warning("SNAKE_JWT_SECRET is not set; using a random secret, tokens will not survive a restart")
    return secrets.token_urlsafe(32)


def main(argv: Optional[list[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    args = parse_args(argv)
    if args.issue_token and not os.environ.get("SNAKE_JWT_SECRET"):
        raise SystemExit("SNAKE_JWT_SECRET must be set to issue tokens")
    secret = load_secret()
    if args.issue_token:
        print(auth.issue_token(args.issue_token, secret))
        return

    settings = GameSettings(
        grid_width=args.grid_width,
        grid_height=args.grid_height,
        start_cell=(args.grid_width // 2, args.grid_height // 2),
        tick_interval=args.tick_interval,
        sabotage_cooldown=args.cooldown,
    )
    ledger = ScoreLedger(JsonScoreStore(args.scores), settings.leaderboard_size)
    ledger.load()
    server = GameServer(args.host, args.port, Game(settings, ledger), auth.TokenIdentityProvider(secret))
    asyncio.run(server.start())


if __name__ == "__main__":
    main()
