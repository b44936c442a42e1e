"""
Tests for Configuration Validation

Tests cover validate_settings() and get_config_summary().
"""

import pytest
from unittest.mock import patch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from config.validators import get_config_summary, validate_settings
from utils.exceptions import ConfigurationError


@pytest.fixture
def valid_settings():
    """Patch settings to a known-good configuration."""
    with patch.multiple(
        settings,
        API_BASE_URL="https://api.test/api",
        API_TOKEN="secret-token",
        HTTP_TIMEOUT=10.0,
        HTTP_CONNECT_TIMEOUT=5.0,
        LISTING_PAGE_SIZE=50,
        SEMANTIC_SEARCH_PAGE=1,
        SEMANTIC_SEARCH_LIMIT=10,
        SEMANTIC_QUERY_MIN_LENGTH=3,
        SEMANTIC_QUERY_MAX_LENGTH=500,
        LOG_LEVEL="INFO",
    ):
        yield settings


class TestValidateSettings:
    """Tests for validate_settings()."""

    def test_defaults_are_valid(self, valid_settings):
        assert validate_settings() is True

    def test_missing_token_only_warns(self, valid_settings, caplog):
        with patch.object(settings, "API_TOKEN", None):
            assert validate_settings() is True

        assert "PROFILE_API_TOKEN is not set" in caplog.text

    @pytest.mark.parametrize("url", ["", "dashboard.example.com/api", "ftp://example.com"])
    def test_base_url_must_be_absolute_http(self, valid_settings, url):
        with patch.object(settings, "API_BASE_URL", url):
            with pytest.raises(ConfigurationError, match="PROFILE_API_BASE_URL"):
                validate_settings()

    def test_page_size_bounds(self, valid_settings):
        with patch.object(settings, "LISTING_PAGE_SIZE", 0):
            with pytest.raises(ConfigurationError, match="LISTING_PAGE_SIZE"):
                validate_settings()

    def test_query_bounds_must_be_ordered(self, valid_settings):
        with patch.multiple(settings, SEMANTIC_QUERY_MIN_LENGTH=20, SEMANTIC_QUERY_MAX_LENGTH=10):
            with pytest.raises(ConfigurationError, match="must not exceed"):
                validate_settings()

    def test_search_page_is_fixed(self, valid_settings):
        with patch.object(settings, "SEMANTIC_SEARCH_PAGE", 2):
            with pytest.raises(ConfigurationError, match="SEMANTIC_SEARCH_PAGE"):
                validate_settings()

    def test_timeouts_must_be_positive(self, valid_settings):
        with patch.object(settings, "HTTP_TIMEOUT", 0):
            with pytest.raises(ConfigurationError, match="PROFILE_API_TIMEOUT"):
                validate_settings()

    def test_log_level(self, valid_settings):
        with patch.object(settings, "LOG_LEVEL", "VERBOSE"):
            with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
                validate_settings()

    def test_all_errors_reported_together(self, valid_settings):
        with patch.multiple(settings, API_BASE_URL="nope", HTTP_CONNECT_TIMEOUT=-1):
            with pytest.raises(ConfigurationError) as exc_info:
                validate_settings()

        message = str(exc_info.value)
        assert "PROFILE_API_BASE_URL" in message
        assert "PROFILE_API_CONNECT_TIMEOUT" in message


class TestConfigSummary:

    def test_summary_hides_token(self, valid_settings):
        summary = get_config_summary()

        assert summary["api"]["token_configured"] is True
        assert "secret-token" not in str(summary)
        assert summary["listing"]["page_size"] == 50
        assert summary["semantic_search"]["query_length"] == "3-500"
