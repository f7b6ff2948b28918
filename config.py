"""Centralized configuration for environment variables.

This module is the single source of truth for configuration used across the
application. Import constants from here rather than calling os.getenv directly
in multiple places. MongoDB connection settings live in ``db.manager``.
"""

from __future__ import annotations

import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


# --- HTTP server ---
PORT: Final[int] = int(os.getenv("PORT", "8080"))

DEV_CORS_ORIGINS: Final[list[str]] = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CORS_ALLOWED_ORIGINS: Final[list[str]] = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
    if origin.strip()
]


# --- Trip discovery ---
# Flat-plane approximation: one degree of latitude or longitude is taken as
# 111 km everywhere.
KM_PER_DEGREE: Final[float] = 111.0
DEFAULT_SEARCH_RADIUS_KM: Final[float] = float(
    os.getenv("DEFAULT_SEARCH_RADIUS_KM", "50"),
)
TRAVELLER_ROLE: Final[str] = "traveller"


def get_cors_origins() -> list[str]:
    """Return configured CORS origins, falling back to local dev hosts."""
    return CORS_ALLOWED_ORIGINS or list(DEV_CORS_ORIGINS)


__all__ = [
    "CORS_ALLOWED_ORIGINS",
    "DEFAULT_SEARCH_RADIUS_KM",
    "DEV_CORS_ORIGINS",
    "KM_PER_DEGREE",
    "PORT",
    "TRAVELLER_ROLE",
    "get_cors_origins",
]
