"""Exceptions raised by the signaling core."""


class SignalingError(Exception):
    """Base class for signaling errors."""


class AlreadyJoinedError(SignalingError):
    """A connection tried to join a room while it is a member of another."""

    def __init__(self, connection_id: str, room: str) -> None:
        super().__init__(f"Connection {connection_id} is already in room {room}")
        self.connection_id = connection_id
        self.room = room
