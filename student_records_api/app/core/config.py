"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  A ``.env`` file in the working directory is loaded first so
that local development does not require exporting variables by hand.
Defaults are provided for all fields.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = "Student Records API"
    api_version: str = "1.0.0"
    log_level: str = "INFO"
    log_file: str = ""

    # Storage target.  ``mongodb://`` and ``mongodb+srv://`` URLs select the
    # document database; anything else is treated as a SQLite file path.
    # ``MONGO_URI`` is accepted as an alias for ``DATABASE_URL``.
    database_url: str = "students.db"
    mongo_db_name: str = "student_records"
    mongo_timeout_ms: int = 5000

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            project_name=os.getenv("PROJECT_NAME", "Student Records API"),
            api_version=os.getenv("API_VERSION", "1.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", ""),
            database_url=os.getenv("DATABASE_URL") or os.getenv("MONGO_URI") or "students.db",
            mongo_db_name=os.getenv("MONGO_DB_NAME", "student_records"),
            mongo_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
        )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables should
# be set before importing this module.
settings = Settings.from_env()
