"""Pydantic models for HTTP responses."""

from typing import Dict, List

from pydantic import BaseModel, Field

from signaling.ice import IceServer


class IceServersResponse(BaseModel):
    """ICE servers for one client session."""

    ice_servers: List[IceServer] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class RootResponse(BaseModel):
    """Root endpoint response."""

    service: str
    status: str
    rooms: int
    connections: int
    endpoints: Dict[str, str]
