"""Entry point for the Memo Board API server.

Starts the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (see
``memo_api.app.core.config``); every other setting is read the same way.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from memo_api.app.core.config import settings
from memo_api.app.main import app


async def run_api() -> None:
    """Serve the API until the process is stopped."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("Memo Board API stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
