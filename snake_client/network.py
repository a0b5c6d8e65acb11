"""Websocket networking client."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed


def build_uri(host: str, port: int, token: Optional[str] = None, guest: bool = False) -> str:
    """Return the server URI carrying either a token or the guest marker."""

    query: Dict[str, str] = {}
    if token:
        query["token"] = token
    elif guest:
        query["guest"] = "1"
    uri = f"ws://{host}:{port}/"
    if query:
        uri = f"{uri}?{urlencode(query)}"
    return uri


class NetworkClient:
    """Asynchronous websocket client that exchanges messages with the server."""

    def __init__(self, uri: str, name: str = "") -> None:
        self.uri = uri
        self.name = name
        self.websocket: Optional[ClientConnection] = None
        self._incoming: asyncio.Queue[Dict[str, Any]] = asyncio.Queue()
        self._receiver_task: Optional[asyncio.Task[None]] = None

    async def connect(self) -> None:
        self.websocket = await connect(self.uri)
        await self._send_json({"type": "join", "name": self.name})
        self._receiver_task = asyncio.create_task(self._receiver_loop())

    async def _receiver_loop(self) -> None:
        assert self.websocket is not None
        try:
            async for message in self.websocket:
                try:
                    payload = json.loads(message)
                except json.JSONDecodeError:
                    continue
                await self._incoming.put(payload)
        except ConnectionClosed:
            pass
        finally:
            await self._incoming.put({"type": "disconnect"})

    async def _send_json(self, payload: Dict[str, Any]) -> None:
        if self.websocket is None:
            raise RuntimeError("Client is not connected")
        await self.websocket.send(json.dumps(payload))

    async def send_direction(self, x: int, y: int) -> None:
        await self._send_json({"type": "changeDirection", "direction": {"x": x, "y": y}})

    async def send_block(self, x: int, y: int) -> None:
        await self._send_json({"type": "placeBlock", "x": x, "y": y})

    async def send_reset(self) -> None:
        await self._send_json({"type": "reset"})

    async def next_message(self) -> Dict[str, Any]:
        return await self._incoming.get()

    def pending(self) -> bool:
        return not self._incoming.empty()

    async def close(self) -> None:
        if self.websocket is not None:
            await self.websocket.close()
        if self._receiver_task is not None:
            await self._receiver_task
