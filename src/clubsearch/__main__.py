"""Entry point for the search API server."""

import asyncio
import contextlib
import sys

import structlog
import uvicorn

from clubsearch.app import create_app
from clubsearch.config import Settings
from clubsearch.logging import configure_logging

logger = structlog.get_logger()


async def serve(settings: Settings) -> None:
    """Run uvicorn until SIGTERM/SIGINT.

    Uvicorn stops accepting connections on the signal and waits up to
    ``shutdown_timeout`` seconds for in-flight searches before the
    lifespan shutdown closes the content repository client.

    Args:
        settings: Server configuration.
    """
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )
    server = uvicorn.Server(config)
    logger.info("server_starting", host=settings.host, port=settings.port)
    await server.serve()


def main() -> None:
    """Entry point for python -m clubsearch."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.log_json)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))

    sys.exit(0)


if __name__ == "__main__":
    main()
