"""
Configuration module for Topper.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of src/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Root log level for the service loggers
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()


# =============================================================================
# Flat-file Storage
# =============================================================================

# Directory holding items.json and ratings.json
DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(_project_root / "data")))

ITEMS_FILENAME: str = os.getenv("ITEMS_FILENAME", "items.json")
RATINGS_FILENAME: str = os.getenv("RATINGS_FILENAME", "ratings.json")


# =============================================================================
# HTTP Server
# =============================================================================

HOST: str = os.getenv("HOST", "127.0.0.1")
PORT: int = int(os.getenv("PORT", "3000"))

# Length of one rate limiting window in seconds
RATE_LIMIT_WINDOW_SECONDS: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# Requests per window per client for all /api/* routes except health
API_RATE_LIMIT: int = int(os.getenv("API_RATE_LIMIT", "100"))

# Rating submissions per window per client
RATING_RATE_LIMIT: int = int(os.getenv("RATING_RATE_LIMIT", "10"))

# Pagination for /api/items and /api/leaderboard
DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))


# =============================================================================
# Content & Recommendation
# =============================================================================

# Locales every item carries a text variant for
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "ro", "uk", "ru")

DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")

# Server-side next item strategy: "tag_overlap" or "weighted"
NEXT_ITEM_STRATEGY: str = os.getenv("NEXT_ITEM_STRATEGY", "tag_overlap")


# =============================================================================
# Seeding & Import
# =============================================================================

# HTTP request timeout in seconds for the awesome-list importer
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

SEED_USERS: int = int(os.getenv("SEED_USERS", "10"))
SEED_ITEMS: int = int(os.getenv("SEED_ITEMS", "30"))
SEED_RATINGS: int = int(os.getenv("SEED_RATINGS", "150"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate configuration values.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production() and DEBUG:
        errors.append("DEBUG must be disabled in production")

    if not (1 <= PORT <= 65535):
        errors.append(f"PORT must be between 1 and 65535, got {PORT}")

    if RATE_LIMIT_WINDOW_SECONDS <= 0:
        errors.append("RATE_LIMIT_WINDOW_SECONDS must be positive")

    if API_RATE_LIMIT < 1:
        errors.append("API_RATE_LIMIT must be at least 1")

    if RATING_RATE_LIMIT < 1:
        errors.append("RATING_RATE_LIMIT must be at least 1")

    if not (1 <= DEFAULT_PAGE_SIZE <= MAX_PAGE_SIZE):
        errors.append("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")

    if DEFAULT_LANGUAGE not in SUPPORTED_LANGUAGES:
        errors.append(
            f"DEFAULT_LANGUAGE must be one of {', '.join(SUPPORTED_LANGUAGES)}, got {DEFAULT_LANGUAGE}"
        )

    if NEXT_ITEM_STRATEGY not in ("tag_overlap", "weighted"):
        errors.append(
            f"NEXT_ITEM_STRATEGY must be 'tag_overlap' or 'weighted', got {NEXT_ITEM_STRATEGY}"
        )

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    return errors


def configure_logging(level: str = None) -> None:
    """Configure root logging for the service (idempotent)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  DATA_DIR: {DATA_DIR}")
    print(f"  HOST/PORT: {HOST}:{PORT}")
    print(f"  API_RATE_LIMIT: {API_RATE_LIMIT}/{RATE_LIMIT_WINDOW_SECONDS:g}s")
    print(f"  RATING_RATE_LIMIT: {RATING_RATE_LIMIT}/{RATE_LIMIT_WINDOW_SECONDS:g}s")
    print(f"  DEFAULT_LANGUAGE: {DEFAULT_LANGUAGE}")
    print(f"  NEXT_ITEM_STRATEGY: {NEXT_ITEM_STRATEGY}")
