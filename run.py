"""Entry point for the Admin Dashboard API.

Starts the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``5000``).  The JSON stores serialise writes inside one process,
so the server always runs a single worker.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from admin_dashboard_api.app.core.config import settings
from admin_dashboard_api.app.main import app


async def main() -> None:
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        workers=1,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
