"""Wire frames and the closed set of inbound signaling events.

Every WebSocket text message is a JSON frame:

    {"event": "create-or-join", "args": ["my-room"]}

Outbound frames have the same shape, e.g. {"event": "created", "args": ["my-room", "<id>"]}.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Outbound event names
CREATED = "created"
JOIN = "join"
JOINED = "joined"
READY = "ready"
FULL = "full"
MESSAGE = "message"
CALL_INITIATED = "call-initiated"
CALL_ACCEPTED = "call-accepted"
CALL_REJECTED = "call-rejected"
LOG = "log"
ERROR = "error"

BYE = "bye"

# Spellings used by older clients
_ALIASES = {
    "create or join": "create-or-join",
    "call initiated": CALL_INITIATED,
    "call accepted": CALL_ACCEPTED,
    "call rejected": CALL_REJECTED,
    "leave room": "leave-room",
}


class Frame(BaseModel):
    """A named event with positional arguments."""

    event: str = Field(..., min_length=1)
    args: list[Any] = Field(default_factory=list)


@dataclass(frozen=True)
class CreateOrJoin:
    room: str


@dataclass(frozen=True)
class Message:
    payload: Any
    room: str


@dataclass(frozen=True)
class CallInitiated:
    caller_name: Any
    room: str


@dataclass(frozen=True)
class CallAccepted:
    accepter_name: Any
    room: str


@dataclass(frozen=True)
class CallRejected:
    room: str


@dataclass(frozen=True)
class LeaveRoom:
    room: str


InboundEvent = Union[
    CreateOrJoin, Message, CallInitiated, CallAccepted, CallRejected, LeaveRoom
]


def normalize_event_name(name: str) -> str:
    return _ALIASES.get(name, name)


def _room(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def parse_event(name: str, args: Sequence[Any]) -> Optional[InboundEvent]:
    """Build the typed event for a frame, or None if it is not a valid request."""
    name = normalize_event_name(name)
    arity = {
        "create-or-join": 1,
        "message": 2,
        "call-initiated": 2,
        "call-accepted": 2,
        "call-rejected": 1,
        "leave-room": 1,
    }.get(name)
    if arity is None:
        logger.debug("Ignoring unknown event %r", name)
        return None
    if len(args) < arity:
        logger.debug("Ignoring %s with %d argument(s)", name, len(args))
        return None

    room = _room(args[arity - 1])
    if room is None:
        logger.debug("Ignoring %s without a room name", name)
        return None

    if name == "create-or-join":
        return CreateOrJoin(room)
    if name == "message":
        return Message(args[0], room)
    if name == "call-initiated":
        return CallInitiated(args[0], room)
    if name == "call-accepted":
        return CallAccepted(args[0], room)
    if name == "call-rejected":
        return CallRejected(room)
    return LeaveRoom(room)
