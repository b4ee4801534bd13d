from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketHub:
    """In-process WebSocket fan-out for the (single) table on this device.

    Contract:
      - register a connection via `connect(websocket)`.
      - broadcast lightweight events with `broadcast(payload)`, or
        `broadcast_soon(payload)` from synchronous code (engine callbacks,
        timer fires) running on the event loop.

    Payloads should be JSON-serializable dicts.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    self._conns.discard(ws)

    def broadcast_soon(self, payload: dict[str, object]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Outside the server loop (e.g. driven directly from tests): nobody to notify.
            logger.debug("hub: no running loop, skipping broadcast %s", payload.get("type"))
            return
        task = loop.create_task(self.broadcast(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


hub = WebSocketHub()
