"""
Configuration module.

Handles environment variables, storage paths, rate limits and language settings.
"""

from src.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    DATA_DIR,
    ITEMS_FILENAME,
    RATINGS_FILENAME,
    HOST,
    PORT,
    RATE_LIMIT_WINDOW_SECONDS,
    API_RATE_LIMIT,
    RATING_RATE_LIMIT,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
    NEXT_ITEM_STRATEGY,
    REQUEST_TIMEOUT,
    SEED_USERS,
    SEED_ITEMS,
    SEED_RATINGS,
    is_production,
    is_development,
    validate_config,
    configure_logging,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "DATA_DIR",
    "ITEMS_FILENAME",
    "RATINGS_FILENAME",
    "HOST",
    "PORT",
    "RATE_LIMIT_WINDOW_SECONDS",
    "API_RATE_LIMIT",
    "RATING_RATE_LIMIT",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    "NEXT_ITEM_STRATEGY",
    "REQUEST_TIMEOUT",
    "SEED_USERS",
    "SEED_ITEMS",
    "SEED_RATINGS",
    "is_production",
    "is_development",
    "validate_config",
    "configure_logging",
    "print_config_summary",
]
