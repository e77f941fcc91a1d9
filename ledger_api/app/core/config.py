"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any configuration.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _split_levels(value: str) -> Dict[str, str]:
    """Parse ``"logger=LEVEL,other=LEVEL"`` into a dict; bad items are skipped."""
    levels = {}
    for item in _split_csv(value):
        name, sep, level = item.partition("=")
        if sep and name.strip() and level.strip():
            levels[name.strip()] = level.strip().upper()
    return levels


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Ledger API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path of a log file.  When empty only console logging is
    # configured.
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Per-logger levels, e.g.
    # LOG_LEVELS="ledger_api.app.services=DEBUG,uvicorn.access=WARNING".
    log_levels: Dict[str, str] = field(
        default_factory=lambda: _split_levels(os.getenv("LOG_LEVELS", ""))
    )

    # Path of the SQLite database.  A relative path is resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "ledger.db")

    # Prefix under which the versioned routers are mounted.  The web
    # front end calls ``/api/persons``, ``/api/accounts`` and so on.
    api_prefix: str = os.getenv("API_PREFIX", "/api")

    # Origins allowed to call the API from a browser.  Comma separated,
    # e.g. CORS_ORIGINS="http://localhost:4200,https://ledger.example.com".
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:4200"))
    )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
