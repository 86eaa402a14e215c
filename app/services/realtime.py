"""
Realtime Channel

In-process publish/subscribe for live order tracking. Connections register
once, join groups ("user_<id>", "rider_<id>", "order_<id>"), and receive
every event published to those groups. Delivery is fire-and-forget: a
connection that fails to receive is dropped, nothing is buffered.
"""
from collections import defaultdict
from typing import Any, Dict, Optional, Protocol, Set
from starlette.websockets import WebSocketDisconnect
import logging
import uuid

log = logging.getLogger(__name__)


class Sender(Protocol):
    async def send_json(self, data: Any) -> None: ...


class ChannelConnection:
    """One subscriber; wraps whatever transport can send JSON frames."""

    def __init__(self, sender: Sender, connection_id: Optional[str] = None):
        self.sender = sender
        self.id = connection_id or uuid.uuid4().hex

    async def send(self, event: str, data: Any) -> None:
        await self.sender.send_json({"event": event, "data": data})

    def __repr__(self) -> str:
        return f"ChannelConnection({self.id})"


def user_group(user_id: Any) -> str:
    return f"user_{user_id}"


def rider_group(rider_id: Any) -> str:
    return f"rider_{rider_id}"


def order_group(order_id: Any) -> str:
    return f"order_{order_id}"


class RealtimeHub:
    def __init__(self):
        self._connections: Dict[str, ChannelConnection] = {}
        self._groups: Dict[str, Set[str]] = defaultdict(set)
        self._memberships: Dict[str, Set[str]] = defaultdict(set)

    def register(self, conn: ChannelConnection) -> None:
        self._connections[conn.id] = conn
        log.info("client connected: %s", conn.id)

    def unregister(self, conn: ChannelConnection) -> None:
        """Drops the connection and every group membership it holds."""
        self._connections.pop(conn.id, None)
        for group in self._memberships.pop(conn.id, set()):
            members = self._groups.get(group)
            if members is None:
                continue
            members.discard(conn.id)
            if not members:
                del self._groups[group]
        log.info("client disconnected: %s", conn.id)

    def subscribe(self, group: str, conn: ChannelConnection) -> None:
        if conn.id not in self._connections:
            self.register(conn)
        self._groups[group].add(conn.id)
        self._memberships[conn.id].add(group)
        log.info("%s joined %s", conn.id, group)

    def members(self, group: str) -> Set[str]:
        return set(self._groups.get(group, set()))

    async def publish(self, group: str, event: str, data: Any) -> int:
        """Sends to every member of `group`; returns how many received it."""
        delivered = 0
        for conn_id in list(self._groups.get(group, ())):
            conn = self._connections.get(conn_id)
            if conn is None:
                continue
            try:
                await conn.send(event, data)
            except (WebSocketDisconnect, RuntimeError, ConnectionError) as exc:
                log.warning("dropping %s after failed send to %s: %s", conn_id, group, exc)
                self.unregister(conn)
                continue
            delivered += 1
        return delivered


async def dispatch(hub: RealtimeHub, conn: ChannelConnection, message: Any) -> None:
    """Handles one client frame of the form {"event": ..., "data": ...}."""
    if not isinstance(message, dict):
        await conn.send("error", {"message": "Frames must be JSON objects"})
        return

    event = message.get("event")
    data = message.get("data")

    if event == "authenticate" and data:
        hub.subscribe(user_group(data), conn)
    elif event == "rider_authenticate" and data:
        hub.subscribe(rider_group(data), conn)
    elif event == "track_order" and data:
        hub.subscribe(order_group(data), conn)
    elif event == "rider_location_update" and isinstance(data, dict) and data.get("orderId"):
        await hub.publish(order_group(data["orderId"]), "rider_location", data.get("location"))
    else:
        log.debug("ignored realtime event from %s: %r", conn.id, event)


hub = RealtimeHub()
