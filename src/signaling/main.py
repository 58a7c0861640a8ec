from __future__ import annotations

import asyncio
import logging

import uvicorn

from signaling.app import create_app
from signaling.config import load_config
from signaling.logging import setup_logging

logger = logging.getLogger(__name__)


async def _serve() -> None:
    config = load_config()
    app = create_app(config)

    # uvicorn installs its own SIGINT/SIGTERM handlers and drains connections.
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.server.host,
            port=config.server.port,
            ssl_keyfile=config.server.ssl_keyfile,
            ssl_certfile=config.server.ssl_certfile,
            log_config=None,
        )
    )

    scheme = "https" if config.server.ssl_certfile else "http"
    logger.info(
        "Signaling server listening on %s://%s:%d",
        scheme,
        config.server.host,
        config.server.port,
    )
    await server.serve()
    logger.info("Signaling server stopped")


def main() -> None:
    setup_logging("signaling-server")
    asyncio.run(_serve())


if __name__ == "__main__":
    main()
