"""ICE server discovery through the Twilio Network Traversal Service.

A failing or unconfigured credential service is not fatal: callers get the
static fallback list (usually just a public STUN server, or nothing).
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from signaling.config import IceConfig

logger = logging.getLogger(__name__)


class IceServer(BaseModel):
    """An RTCIceServer descriptor as handed to the browser."""

    urls: str | list[str]
    username: Optional[str] = None
    credential: Optional[str] = None


class TwilioToken(BaseModel):
    """The part of a Twilio Token resource that we use."""

    ice_servers: list[IceServer]


class IceServerProvider:
    def __init__(
        self,
        config: IceConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._client = client

    def fallback(self) -> list[IceServer]:
        return [IceServer.model_validate(s.model_dump()) for s in self._config.static_servers]

    async def fetch_ice_servers(self) -> list[IceServer]:
        """Mint a fresh set of STUN/TURN credentials.

        Returns the fallback list when credentials are missing or the
        service call fails. There are no retries.
        """
        if not self._config.enabled:
            return self.fallback()

        url = f"{self._config.base_url.rstrip('/')}/Accounts/{self._config.account_sid}/Tokens.json"
        auth = (self._config.account_sid or "", self._config.auth_token or "")

        try:
            if self._client is not None:
                resp = await self._client.post(url, auth=auth, timeout=self._config.timeout)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    resp = await client.post(url, auth=auth)
            resp.raise_for_status()
            token = TwilioToken.model_validate(resp.json())
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch ICE servers: %s", e)
            return self.fallback()
        except ValueError as e:
            logger.warning("Unexpected ICE token response: %s", e)
            return self.fallback()

        logger.info("Fetched %d ICE server(s)", len(token.ice_servers))
        return token.ice_servers
