import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.realtime import ChannelConnection, dispatch, hub

log = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    """Live tracking channel; see app.services.realtime for the event set."""
    await websocket.accept()
    conn = ChannelConnection(websocket)
    hub.register(conn)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                # binary frames carry no event
                await conn.send("error", {"message": "Invalid JSON"})
                continue
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await conn.send("error", {"message": "Invalid JSON"})
                continue
            await dispatch(hub, conn, message)
    except WebSocketDisconnect:
        pass
    finally:
        hub.unregister(conn)
