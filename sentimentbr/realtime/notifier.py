# sentimentbr/realtime/notifier.py
from __future__ import annotations

import logging
from typing import Any, Dict, Set

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

CONNECTED = {"type": "connected", "message": "Conectado ao servidor WebSocket"}
NEW_ANALYSIS = {"type": "newAnalysis", "message": "Nova análise de sentimento registrada"}


class Notifier:
    """Registry of open websocket channels. Delivery is best effort: a failed send drops the channel."""

    def __init__(self):
        self.clients: Set[WebSocket] = set()

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self.clients.add(ws)
        logger.info(f"🔌 websocket connected ({len(self.clients)} open)")
        await ws.send_json(CONNECTED)

    def disconnect(self, ws: WebSocket) -> None:
        self.clients.discard(ws)
        logger.info(f"🔌 websocket closed ({len(self.clients)} open)")

    async def broadcast(self, message: Dict[str, Any]) -> int:
        sent = 0
        for ws in list(self.clients):
            if ws.client_state != WebSocketState.CONNECTED:
                self.clients.discard(ws)
                continue
            try:
                await ws.send_json(message)
                sent += 1
            except Exception as e:
                logger.warning(f"websocket send failed, dropping client: {e}")
                self.clients.discard(ws)
        return sent

    async def notify_new_analysis(self) -> int:
        return await self.broadcast(NEW_ANALYSIS)
