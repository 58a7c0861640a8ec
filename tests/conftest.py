import asyncio
from typing import Any

import pytest

from signaling.config import SignalingConfig
from signaling.registry import RoomRegistry
from signaling.session import SignalingSession
from signaling.transport import ConnectionHub


class Peer:
    """A session plus the outbound frames queued for it."""

    def __init__(self, session: SignalingSession, outbox: asyncio.Queue) -> None:
        self.session = session
        self.outbox = outbox
        self.received: list[tuple[str, list[Any]]] = []

    @property
    def id(self) -> str:
        return self.session.connection_id

    def send(self, event: str, *args: Any) -> None:
        self.session.handle(event, list(args))

    def drain(self) -> list[tuple[str, list[Any]]]:
        """Frames received since the last drain, excluding 'log' mirroring."""
        frames = []
        while not self.outbox.empty():
            frame = self.outbox.get_nowait()
            self.received.append((frame.event, frame.args))
            if frame.event != "log":
                frames.append((frame.event, frame.args))
        return frames


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def hub(registry):
    return ConnectionHub(registry)


@pytest.fixture
def signaling_config():
    return SignalingConfig()


@pytest.fixture
def make_peer(registry, hub, signaling_config):
    def _make(name: str) -> Peer:
        outbox = hub.attach(name)
        session = SignalingSession(name, registry, hub, signaling_config)
        return Peer(session, outbox)

    return _make
