"""
Custom Exception Classes for the Profile Dashboard

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import Optional


class ProfileDashboardError(Exception):
    """Base exception for all Profile Dashboard errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ProfileDashboardError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(ProfileDashboardError):
    """Raised when user input is rejected before any network call."""
    pass


class SemanticQueryValidationError(ValidationError):
    """Raised when a semantic search query is outside the allowed length bounds."""
    pass


# =============================================================================
# API Errors
# =============================================================================

class ApiError(ProfileDashboardError):
    """Base exception for profile API errors."""
    pass


class AuthExpiredError(ApiError):
    """Raised when the API rejects the bearer credential (HTTP 401)."""
    pass


class AcquisitionError(ApiError):
    """Raised when a listing or search request fails (non-2xx or transport failure)."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 user_message: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.user_message = user_message or message


class SearchError(AcquisitionError):
    """Raised when a semantic search request fails or reports success=false."""
    pass


class MalformedResponseError(ApiError):
    """Raised when the API returns a payload that cannot be parsed."""
    pass


# =============================================================================
# Detail Errors
# =============================================================================

class DetailResolutionError(ProfileDashboardError):
    """Raised when a single profile's full record cannot be resolved."""
    pass
