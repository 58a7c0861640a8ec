"""WebSocket handler: one signaling session per socket."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from signaling import events
from signaling.config import SignalingConfig
from signaling.events import Frame
from signaling.registry import RoomRegistry
from signaling.session import SignalingSession
from signaling.transport import ConnectionHub, new_connection_id

logger = logging.getLogger(__name__)


async def websocket_signaling_session(
    websocket: WebSocket,
    registry: RoomRegistry,
    hub: ConnectionHub,
    config: SignalingConfig,
) -> None:
    """Run the signaling protocol over one WebSocket until either side closes.

    Client frames:
      {"event": "create-or-join", "args": ["room"]}
      {"event": "message", "args": [<payload>, "room"]}
      {"event": "call-initiated", "args": ["Alice", "room"]}
      {"event": "call-accepted", "args": ["Bob", "room"]}
      {"event": "call-rejected", "args": ["room"]}
      {"event": "leave-room", "args": ["room"]}

    Server frames use the same shape.
    """
    await websocket.accept()
    connection_id = new_connection_id()
    outbox = hub.attach(connection_id)
    session = SignalingSession(connection_id, registry, hub, config)
    logger.info("Client ID %s connected", connection_id)

    async def _read_ws() -> None:
        """Read frames from the WebSocket and dispatch them in arrival order."""
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                text = _message_text(message)
                if text is None:
                    logger.debug("Undecodable frame from %s", connection_id)
                    hub.send_to(connection_id, events.ERROR, "Invalid frame")
                    continue
                try:
                    frame = Frame.model_validate_json(text)
                except ValidationError as e:
                    logger.debug("Invalid frame from %s: %s", connection_id, e)
                    hub.send_to(connection_id, events.ERROR, "Invalid frame")
                    continue
                session.handle(frame.event, frame.args)
        except WebSocketDisconnect:
            pass
        except (ConnectionResetError, BrokenPipeError):
            pass

    async def _write_ws() -> None:
        """Flush queued outbound frames to the WebSocket."""
        try:
            while True:
                frame = await outbox.get()
                await websocket.send_json(frame.model_dump())
        except (WebSocketDisconnect, RuntimeError):
            pass
        except OSError:
            # ConnectionResetError, BrokenPipeError, uvicorn's ClientDisconnected
            pass

    read_task = asyncio.create_task(_read_ws())
    write_task = asyncio.create_task(_write_ws())
    try:
        done, _ = await asyncio.wait(
            [read_task, write_task], return_when=asyncio.FIRST_COMPLETED
        )
        for task in done:
            task.result()

    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("Unexpected error in signaling WebSocket")
        try:
            await websocket.send_json(
                Frame(event=events.ERROR, args=["An unexpected error occurred."]).model_dump()
            )
        except (WebSocketDisconnect, RuntimeError, OSError):
            pass
    finally:
        for task in (read_task, write_task):
            task.cancel()
        await asyncio.gather(read_task, write_task, return_exceptions=True)
        session.disconnect()
        hub.detach(connection_id)


def _message_text(message: dict) -> Optional[str]:
    """The frame payload as text; binary frames must be UTF-8."""
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None
