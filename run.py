"""Entry point for serving the Ledger API.

Launches the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Host and port are read from the environment variables ``LEDGER_HOST``
and ``LEDGER_PORT`` (defaults ``0.0.0.0`` and ``8000``).  Application
settings such as ``DATABASE_URL`` and ``LOG_LEVEL`` are read by
``ledger_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from ledger_api.app.main import app


async def run_api() -> None:
    """Start the API server using Uvicorn."""
    host = os.getenv("LEDGER_HOST", "0.0.0.0")
    port = int(os.getenv("LEDGER_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info("Serving Ledger API on %s:%s", host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
