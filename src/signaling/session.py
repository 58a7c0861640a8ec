"""Signaling session: one per WebSocket connection.

Translates inbound events into registry operations and outbound events.
Handlers are synchronous: each event runs to completion before the next
frame from the same connection is read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from signaling import events
from signaling.config import SignalingConfig
from signaling.events import (
    CallAccepted,
    CallInitiated,
    CallRejected,
    CreateOrJoin,
    InboundEvent,
    LeaveRoom,
    Message,
)
from signaling.registry import Created, Full, JoinedAsSecond

if TYPE_CHECKING:
    from signaling.registry import RoomRegistry
    from signaling.transport import ConnectionHub

logger = logging.getLogger(__name__)


class SignalingSession:
    def __init__(
        self,
        connection_id: str,
        registry: RoomRegistry,
        hub: ConnectionHub,
        config: Optional[SignalingConfig] = None,
    ) -> None:
        self._connection_id = connection_id
        self._registry = registry
        self._hub = hub
        self._config = config or SignalingConfig()
        self._closed = False

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def room(self) -> Optional[str]:
        """The joined room, or None while unjoined.

        Read from the registry so that a forced leave by the peer is visible.
        """
        return self._registry.room_of(self._connection_id)

    @property
    def closed(self) -> bool:
        return self._closed

    def handle(self, name: str, args: Sequence[Any] = ()) -> None:
        """Process one inbound frame. Invalid or out-of-state events are dropped."""
        if self._closed:
            return
        event = events.parse_event(name, args)
        if event is None:
            return
        self.dispatch(event)

    def dispatch(self, event: InboundEvent) -> None:
        if self._closed:
            return
        match event:
            case CreateOrJoin(room=room):
                self._handle_create_or_join(room)
            case Message(payload=payload, room=room):
                self._handle_message(payload, room)
            case CallInitiated(caller_name=caller_name, room=room):
                if self._in_room(room, event):
                    self._hub.broadcast_to_room_except(
                        room, self._connection_id, events.CALL_INITIATED, caller_name
                    )
            case CallAccepted(accepter_name=accepter_name, room=room):
                if self._in_room(room, event):
                    self._hub.broadcast_to_room_except(
                        room, self._connection_id, events.CALL_ACCEPTED, accepter_name
                    )
            case CallRejected(room=room):
                self._handle_call_rejected(room)
            case LeaveRoom(room=room):
                if self._in_room(room, event):
                    self._leave(room)

    def disconnect(self) -> None:
        """Transport-level close: same cleanup as an explicit leave."""
        if self._closed:
            return
        room = self.room
        if room is not None:
            self._leave(room)
        self._closed = True
        logger.info("Client ID %s disconnected.", self._connection_id)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _handle_create_or_join(self, room: str) -> None:
        current = self.room
        if current is not None:
            logger.warning(
                "Client ID %s asked to join %s while in room %s; ignored",
                self._connection_id,
                room,
                current,
            )
            return

        self._log(f"Received request to create or join room {room}")
        self._log(f"Room {room} now has {self._registry.occupant_count(room)} client(s)")

        outcome = self._registry.try_join(room, self._connection_id)
        match outcome:
            case Created():
                self._log(f"Client ID {self._connection_id} created room {room}")
                self._hub.send_to(
                    self._connection_id, events.CREATED, room, self._connection_id
                )
            case JoinedAsSecond(other=other):
                self._log(f"Client ID {self._connection_id} joined room {room}")
                self._hub.send_to(other, events.JOIN, room)
                self._hub.send_to(
                    self._connection_id, events.JOINED, room, self._connection_id
                )
                self._hub.broadcast_to_room(room, events.READY)
            case Full():
                self._hub.send_to(self._connection_id, events.FULL, room)

    def _handle_message(self, payload: Any, room: str) -> None:
        if not self._in_room(room, "message"):
            return
        self._log("Client said: ", payload)
        self._hub.broadcast_to_room_except(
            room, self._connection_id, events.MESSAGE, payload
        )
        if self._config.bye_leaves_room and payload == events.BYE:
            self._leave(room)

    def _handle_call_rejected(self, room: str) -> None:
        if not self._in_room(room, "call-rejected"):
            return
        self._hub.broadcast_to_room_except(
            room, self._connection_id, events.CALL_REJECTED
        )
        for occupant in self._registry.occupants(room):
            if occupant != self._connection_id:
                self._registry.leave(room, occupant)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _leave(self, room: str) -> None:
        self._registry.leave(room, self._connection_id)

    def _in_room(self, room: str, event: object) -> bool:
        if self.room == room:
            return True
        logger.debug(
            "Client ID %s is not in room %s; dropping %s",
            self._connection_id,
            room,
            event,
        )
        return False

    def _log(self, *parts: Any) -> None:
        """Log locally and, if enabled, echo the line to the client."""
        logger.info("Message from server: %s", " ".join(str(p) for p in parts))
        if self._config.client_log:
            self._hub.send_to(
                self._connection_id,
                events.LOG,
                ["Message from server:", *parts],
            )
