"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the API can be
started without any configuration for local use.  Tests construct their
own ``Settings`` instance and pass it to ``create_app``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Repair Shop API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path to a log file.  When empty, logs only go to the console.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  A relative path is resolved
    # against the current working directory.  Connections are opened per
    # operation, so ``:memory:`` is not supported.
    database_url: str = os.getenv("DATABASE_URL", "repair_shop.db")

    # Prefix under which the routers are mounted, e.g. ``/api``.  Empty
    # by default so that routes are served as ``/services`` and
    # ``/inventory``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # Leading characters of every generated ticket serial number.
    serial_prefix: str = os.getenv("SERIAL_PREFIX", "SN")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
