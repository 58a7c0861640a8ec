"""Connection hub: one outbound queue per live WebSocket connection.

Sessions never touch sockets. They push frames onto the target
connection's queue and the gateway's write loop flushes it.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from signaling.events import Frame
from signaling.registry import RoomRegistry

logger = logging.getLogger(__name__)


def new_connection_id() -> str:
    return uuid.uuid4().hex


class ConnectionHub:
    def __init__(self, registry: RoomRegistry) -> None:
        self._registry = registry
        self._outboxes: dict[str, asyncio.Queue[Frame]] = {}

    def attach(self, connection_id: str) -> asyncio.Queue[Frame]:
        outbox: asyncio.Queue[Frame] = asyncio.Queue()
        self._outboxes[connection_id] = outbox
        logger.debug("Attached connection %s (total: %d)", connection_id, len(self))
        return outbox

    def detach(self, connection_id: str) -> None:
        self._outboxes.pop(connection_id, None)
        logger.debug("Detached connection %s", connection_id)

    def is_attached(self, connection_id: str) -> bool:
        return connection_id in self._outboxes

    def send_to(self, connection_id: str, event: str, *args: Any) -> None:
        outbox = self._outboxes.get(connection_id)
        if outbox is None:
            logger.debug("Dropping %s for detached connection %s", event, connection_id)
            return
        outbox.put_nowait(Frame(event=event, args=list(args)))

    def broadcast_to_room(self, room: str, event: str, *args: Any) -> None:
        """Send an event to every occupant of a room."""
        for connection_id in self._registry.occupants(room):
            self.send_to(connection_id, event, *args)

    def broadcast_to_room_except(
        self, room: str, exclude: str, event: str, *args: Any
    ) -> None:
        """Send an event to every occupant of a room except one connection."""
        for connection_id in self._registry.occupants(room):
            if connection_id != exclude:
                self.send_to(connection_id, event, *args)

    def __len__(self) -> int:
        return len(self._outboxes)
