"""Signaling server configuration with Pydantic models.

Follows the same pattern everywhere in the project:
- Load from YAML file
- Override with environment variables
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


class ServerConfig(BaseModel):
    """HTTP/WebSocket server configuration."""
    host: str = Field("0.0.0.0", description="Server bind address")
    port: int = Field(8080, description="Server port")
    ssl_keyfile: Optional[str] = Field(None, description="TLS private key (PEM)")
    ssl_certfile: Optional[str] = Field(None, description="TLS certificate (PEM)")


class CorsConfig(BaseModel):
    """CORS configuration."""
    origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed origins for CORS",
    )
    allow_credentials: bool = Field(True, description="Allow credentials")


class SignalingConfig(BaseModel):
    """Room protocol behaviour."""
    room_capacity: int = Field(2, ge=1, le=2, description="Occupants per room")
    client_log: bool = Field(
        True, description="Mirror server log lines to the client as 'log' events"
    )
    bye_leaves_room: bool = Field(
        True, description="A relayed 'bye' message also leaves the room"
    )


class IceServerConfig(BaseModel):
    """A statically configured STUN/TURN server."""
    urls: str | list[str]
    username: Optional[str] = None
    credential: Optional[str] = None


class IceConfig(BaseModel):
    """ICE credential service (Twilio Network Traversal) configuration."""
    account_sid: Optional[str] = Field(None, description="Twilio account SID")
    auth_token: Optional[str] = Field(None, description="Twilio auth token")
    base_url: str = Field(
        "https://api.twilio.com/2010-04-01", description="Twilio REST API base URL"
    )
    timeout: float = Field(10.0, description="HTTP timeout in seconds")
    static_servers: list[IceServerConfig] = Field(
        default_factory=list,
        description="Returned when no credentials are set or the service fails",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.account_sid and self.auth_token)


class AppConfig(BaseModel):
    """Application configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    signaling: SignalingConfig = Field(default_factory=SignalingConfig)
    ice: IceConfig = Field(default_factory=IceConfig)


def _default_config_path() -> Path:
    return Path(__file__).resolve().parents[2] / "config.yaml"


def load_config(path: Optional[Path | str] = None) -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Environment variables take precedence over YAML values:
    - SIGNALING_HOST / SIGNALING_PORT: listen address
    - TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN: ICE credential service
    - CORS_ORIGINS: comma-separated list of allowed origins
    """
    config_path = Path(path) if path is not None else _default_config_path()

    if not config_path.is_file():
        config = AppConfig()
    else:
        with config_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config at {config_path} must be a mapping.")
        try:
            config = AppConfig.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc

    if host := os.environ.get("SIGNALING_HOST"):
        config.server.host = host
    if port := os.environ.get("SIGNALING_PORT"):
        config.server.port = int(port)

    if sid := os.environ.get("TWILIO_ACCOUNT_SID"):
        config.ice.account_sid = sid
    if token := os.environ.get("TWILIO_AUTH_TOKEN"):
        config.ice.auth_token = token

    if origins := os.environ.get("CORS_ORIGINS"):
        config.cors.origins = [o.strip() for o in origins.split(",") if o.strip()]

    return config
