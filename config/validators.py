"""
Configuration Validation for the Profile Dashboard

This module contains configuration validation logic.
Kept apart from settings.py so settings stay a plain list of constants.
"""

import logging
from urllib.parse import urlparse

from utils.exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []
    logger = logging.getLogger(__name__)

    # API base URL must be absolute
    parsed = urlparse(settings.API_BASE_URL or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        errors.append(f"PROFILE_API_BASE_URL must be an absolute http(s) URL, got {settings.API_BASE_URL!r}")

    if not settings.API_TOKEN:
        logger.warning("PROFILE_API_TOKEN is not set. Requests will be sent without a bearer token.")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("LISTING_PAGE_SIZE", settings.LISTING_PAGE_SIZE, 1, 500),
        ("SEMANTIC_SEARCH_LIMIT", settings.SEMANTIC_SEARCH_LIMIT, 1, 100),
        ("SEMANTIC_QUERY_MIN_LENGTH", settings.SEMANTIC_QUERY_MIN_LENGTH, 1, 50),
        ("SEMANTIC_QUERY_MAX_LENGTH", settings.SEMANTIC_QUERY_MAX_LENGTH, 1, 5000),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.SEMANTIC_QUERY_MIN_LENGTH > settings.SEMANTIC_QUERY_MAX_LENGTH:
        errors.append("SEMANTIC_QUERY_MIN_LENGTH must not exceed SEMANTIC_QUERY_MAX_LENGTH")

    if settings.SEMANTIC_SEARCH_PAGE != 1:
        errors.append(f"SEMANTIC_SEARCH_PAGE must be 1, got {settings.SEMANTIC_SEARCH_PAGE}")

    # Validate timeout values are positive
    timeout_settings = [
        ("PROFILE_API_TIMEOUT", settings.HTTP_TIMEOUT),
        ("PROFILE_API_CONNECT_TIMEOUT", settings.HTTP_CONNECT_TIMEOUT),
    ]

    for name, value in timeout_settings:
        if value <= 0:
            errors.append(f"{name} must be positive, got {value}")

    if settings.LOG_LEVEL not in VALID_LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, got {settings.LOG_LEVEL}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "api": {
            "base_url": settings.API_BASE_URL,
            "token_configured": bool(settings.API_TOKEN),
            "timeout": settings.HTTP_TIMEOUT,
        },
        "listing": {
            "page_size": settings.LISTING_PAGE_SIZE,
        },
        "semantic_search": {
            "limit": settings.SEMANTIC_SEARCH_LIMIT,
            "query_length": f"{settings.SEMANTIC_QUERY_MIN_LENGTH}-{settings.SEMANTIC_QUERY_MAX_LENGTH}",
        },
    }
