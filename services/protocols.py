"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the collaborators the
profile dashboard relies on but does not own. These protocols enable loose
coupling, dependency injection, and easier testing.

Protocols defined:
- SessionManager: Interface for credential lookup and session termination
- TelemetrySink: Interface for reporting non-fatal failures
"""

from typing import Optional, Protocol

from utils.logger import get_logger


class SessionManager(Protocol):
    """Protocol defining the interface for the authentication collaborator.

    Implementations should provide methods for:
    - Supplying the bearer credential for API requests
    - Terminating the session when the API rejects that credential
    """

    def get_auth_token(self) -> Optional[str]:
        """Return the current bearer token, or None if there is none."""
        ...

    def on_session_expired(self) -> None:
        """Clear all local session state after a 401 response."""
        ...


class TelemetrySink(Protocol):
    """Protocol defining the interface for non-fatal failure reporting."""

    def record_failure(self, operation: str, error: BaseException) -> None:
        """Record a failure that was handled without crashing.

        Args:
            operation: Short name of the operation that failed.
            error: The exception that was handled.
        """
        ...


class LoggingTelemetry:
    """TelemetrySink that writes failures to the application log."""

    def __init__(self, logger_name: str = "telemetry"):
        self.logger = get_logger(logger_name)

    def record_failure(self, operation: str, error: BaseException) -> None:
        self.logger.warning(f"{operation} failed: {type(error).__name__}: {error}")
