# sentimentbr/api/routers/realtime.py
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from sentimentbr.api.deps import get_notifier
from sentimentbr.realtime.notifier import Notifier

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def ws_updates(ws: WebSocket, notifier: Notifier = Depends(get_notifier)):
    """Server push only: 'connected' on open, 'newAnalysis' after each submission."""
    await notifier.connect(ws)
    try:
        while True:
            # clients send nothing meaningful; reading is how the close is noticed
            await ws.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(ws)
