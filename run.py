"""Entry point for the Web Archive Tag API.

Serves the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (see
``web_archive_api.app.core.config``); other settings such as
``DATABASE_URL`` and ``BEARER_TOKEN`` are read the same way.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from web_archive_api.app.core.config import settings


async def main() -> None:
    config = Config(
        app="web_archive_api.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
