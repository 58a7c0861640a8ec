"""Room registry: maps room name → ordered occupants (creator, joiner).

Process-wide, in-memory, lost on restart. Rooms exist only while they have
at least one occupant; the departure that empties a room deletes it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Union

from signaling.exceptions import AlreadyJoinedError

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 2


@dataclass(frozen=True)
class Created:
    room: str


@dataclass(frozen=True)
class JoinedAsSecond:
    room: str
    other: str


@dataclass(frozen=True)
class Full:
    room: str


JoinOutcome = Union[Created, JoinedAsSecond, Full]


class RoomRegistry:
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if not 1 <= capacity <= DEFAULT_CAPACITY:
            raise ValueError(f"Room capacity must be 1 or 2, got {capacity}")
        self._capacity = capacity
        self._rooms: dict[str, list[str]] = {}
        self._membership: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def try_join(self, room: str, connection_id: str) -> JoinOutcome:
        """Add a connection to a room, creating the room if needed.

        Raises AlreadyJoinedError if the connection is in any room already.
        A full room is a normal outcome, not an error.
        """
        with self._lock:
            current = self._membership.get(connection_id)
            if current is not None:
                raise AlreadyJoinedError(connection_id, current)

            occupants = self._rooms.get(room)
            if occupants is None:
                self._rooms[room] = [connection_id]
                self._membership[connection_id] = room
                logger.info("Connection %s created room %s", connection_id, room)
                return Created(room)

            if len(occupants) >= self._capacity:
                logger.info(
                    "Connection %s rejected from full room %s", connection_id, room
                )
                return Full(room)

            other = occupants[0]
            occupants.append(connection_id)
            self._membership[connection_id] = room
            logger.info(
                "Connection %s joined room %s (total: %d)",
                connection_id,
                room,
                len(occupants),
            )
            return JoinedAsSecond(room, other)

    def leave(self, room: str, connection_id: str) -> None:
        """Remove a connection from a room. No-op if it is not a member."""
        with self._lock:
            occupants = self._rooms.get(room)
            if occupants is None or connection_id not in occupants:
                return
            occupants.remove(connection_id)
            if self._membership.get(connection_id) == room:
                del self._membership[connection_id]
            if not occupants:
                del self._rooms[room]
                logger.info("Room %s is empty and was removed", room)
            logger.info("Connection %s left room %s", connection_id, room)

    def occupants(self, room: str) -> tuple[str, ...]:
        """Snapshot of a room's occupants, creator first."""
        with self._lock:
            return tuple(self._rooms.get(room, ()))

    def occupant_count(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def room_of(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._membership.get(connection_id)

    def rooms(self) -> dict[str, tuple[str, ...]]:
        with self._lock:
            return {name: tuple(occ) for name, occ in self._rooms.items()}

    def __contains__(self, room: object) -> bool:
        with self._lock:
            return room in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
