"""Entry point for the Student Records API.

Serves the FastAPI application with Uvicorn.  Host and port come from
``HOST`` and ``PORT`` (defaults ``0.0.0.0`` and ``5000``); the storage
target and other options are read from the environment or a ``.env``
file, see ``student_records_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from student_records_api.app.core.config import settings
from student_records_api.app.main import app

logger = logging.getLogger(__name__)


async def main() -> None:
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level="info")
    server = Server(config)
    logger.info("Server running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
