"""FastAPI application: signaling WebSocket plus a few HTTP endpoints."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from signaling import __version__
from signaling.config import AppConfig, load_config
from signaling.ice import IceServerProvider
from signaling.models import HealthResponse, IceServersResponse, RootResponse
from signaling.registry import RoomRegistry
from signaling.transport import ConnectionHub
from signaling.websocket import websocket_signaling_session

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    ice_provider: Optional[IceServerProvider] = None,
) -> FastAPI:
    """Build the application with its own registry and connection hub."""
    config = config or load_config()

    app = FastAPI(
        title="WebRTC Signaling",
        description="Two-party room signaling relay for WebRTC call setup",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.origins,
        allow_credentials=config.cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    registry = RoomRegistry(capacity=config.signaling.room_capacity)
    app.state.config = config
    app.state.registry = registry
    app.state.hub = ConnectionHub(registry)
    app.state.ice = ice_provider or IceServerProvider(config.ice)

    @app.websocket("/ws")
    async def signaling_ws(websocket: WebSocket) -> None:
        state = websocket.app.state
        await websocket_signaling_session(
            websocket, state.registry, state.hub, state.config.signaling
        )

    @app.get("/api/ice-servers", response_model=IceServersResponse)
    async def ice_servers(request: Request) -> IceServersResponse:
        """STUN/TURN servers for one client session."""
        servers = await request.app.state.ice.fetch_ice_servers()
        return IceServersResponse(ice_servers=servers)

    @app.get("/", response_model=RootResponse)
    async def root(request: Request) -> RootResponse:
        """Service info and available endpoints."""
        state = request.app.state
        return RootResponse(
            service="webrtc-signaling",
            status="running",
            rooms=len(state.registry),
            connections=len(state.hub),
            endpoints={
                "health": "/health",
                "signaling_ws": "/ws",
                "ice_servers_api": "/api/ice-servers",
            },
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok")

    logger.info(
        "Signaling app initialised (room capacity %d, ICE service %s)",
        registry.capacity,
        "enabled" if config.ice.enabled else "disabled",
    )
    return app
