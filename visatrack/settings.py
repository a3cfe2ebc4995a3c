"""
visatrack.settings
==================

Configuration settings for the VisaTrack application.

Database and server options are plain module constants read from
``VISATRACK_*`` environment variables; runtime behaviour (cache, seeding,
logging, CORS) lives on the pydantic :class:`Settings` model so it can also
be supplied through a ``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("VISATRACK_DB_FILE", BASE_DIR / "visatrack.db")
DB_URL = os.environ.get("VISATRACK_DB_URL", f"sqlite:///{DB_FILE}")
DB_ECHO = os.environ.get("VISATRACK_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("VISATRACK_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("VISATRACK_API_PORT", "8000"))
API_DEBUG = os.environ.get("VISATRACK_API_DEBUG", "False").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Runtime settings, loaded from environment variables or ``.env``."""

    cache_enabled: bool = Field(True, description="Cache dashboard summaries per tenant")
    cache_ttl: int = Field(300, description="Dashboard cache TTL in seconds (5 minutes)")
    allow_seed: bool = Field(
        default=API_DEBUG,
        description="Allow POST /seed to write demo employees (dev environments only)",
    )
    log_level: str = Field("INFO", description="Root logging level for the API")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origins allowed to call the API from a browser",
    )

    class Config:
        """Configuration for the settings model."""
        env_prefix = "VISATRACK_"
        env_file = ".env"
        case_sensitive = False


settings = Settings()
