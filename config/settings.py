"""
Configuration Settings for the Profile Dashboard

This module centralizes all configuration settings for the Profile Dashboard,
including environment variables, API endpoints, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


# =============================================================================
# API Settings
# =============================================================================

API_BASE_URL = os.getenv("PROFILE_API_BASE_URL", "https://dashboard.shotzspot.com/api")

# Bearer token used by the command-line session (the web app stores its own)
API_TOKEN = os.getenv("PROFILE_API_TOKEN")

HTTP_TIMEOUT = _get_float("PROFILE_API_TIMEOUT", 10.0)          # Seconds for a whole request
HTTP_CONNECT_TIMEOUT = _get_float("PROFILE_API_CONNECT_TIMEOUT", 5.0)

# =============================================================================
# Listing Settings
# =============================================================================

LISTING_PAGE_SIZE = 50               # Profiles per filtered page

# =============================================================================
# Semantic Search Settings
# =============================================================================

SEMANTIC_SEARCH_PAGE = 1             # Semantic search is one-shot, always page 1
SEMANTIC_SEARCH_LIMIT = 10           # Ranked results returned per search
SEMANTIC_QUERY_MIN_LENGTH = 3        # Minimum trimmed query length
SEMANTIC_QUERY_MAX_LENGTH = 500      # Maximum raw query length

# =============================================================================
# Logging Settings
# =============================================================================

LOG_FILE = os.getenv("LOG_FILE", os.path.join(APP_ROOT, "dashboard.log"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
