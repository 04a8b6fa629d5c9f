"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with no configuration at all; in a deployment override
them via environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Memo Board API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite database.  A relative path is resolved against
    # the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "memo_board.db")

    # Server-side sessions.  The token is handed to the client in a
    # cookie; the record itself lives in the ``sessions`` table.
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "memo_session")
    session_expire_minutes: int = int(os.getenv("SESSION_EXPIRE_MINUTES", str(60 * 24)))
    session_cookie_secure: bool = os.getenv("SESSION_COOKIE_SECURE", "false").lower() in {"1", "true", "yes"}

    password_iterations: int = int(os.getenv("PASSWORD_ITERATIONS", "100000"))

    # Feed page size and the maximum number of username search hits.
    page_size: int = int(os.getenv("MEMO_PAGE_SIZE", "6"))
    search_limit: int = int(os.getenv("SEARCH_LIMIT", "5"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
