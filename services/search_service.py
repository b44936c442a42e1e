"""
Semantic Search Service Module

This module runs one-shot free-text ("AI") searches against the profile API.
A search always asks for the first page of a small ranked result set; the
returned page is not paginated further on the client.
"""

from typing import Optional

from config import settings
from data.models import AcquisitionMode, ProfileSummary, ResultPage
from data.protocols import ProfileSource
from services.protocols import LoggingTelemetry, SessionManager, TelemetrySink
from utils.exceptions import (
    AcquisitionError, AuthExpiredError, SearchError, SemanticQueryValidationError
)
from utils.logger import get_logger

logger = get_logger(__name__)


def validate_semantic_query(query: Optional[str]) -> str:
    """
    Check a semantic search query against the length bounds.

    Args:
        query: Raw text as typed by the user.

    Returns:
        str: The trimmed query.

    Raises:
        SemanticQueryValidationError: If the query is blank, too short once
            trimmed, or longer than the maximum.
    """
    trimmed = (query or "").strip()
    if not trimmed:
        raise SemanticQueryValidationError("Please enter a search query")
    if len(trimmed) < settings.SEMANTIC_QUERY_MIN_LENGTH:
        raise SemanticQueryValidationError(
            f"Search query must be at least {settings.SEMANTIC_QUERY_MIN_LENGTH} characters long"
        )
    if len(query) > settings.SEMANTIC_QUERY_MAX_LENGTH:
        raise SemanticQueryValidationError(
            f"Search query must be at most {settings.SEMANTIC_QUERY_MAX_LENGTH} characters long"
        )
    return trimmed


class SearchService:
    """Acquires a ranked result set for a free-text query."""

    def __init__(
        self,
        source: ProfileSource,
        session: SessionManager,
        telemetry: Optional[TelemetrySink] = None,
    ):
        self.source = source
        self.session = session
        self.telemetry = telemetry or LoggingTelemetry()
        self.last_query: Optional[str] = None

    async def fetch(self, query: str) -> ResultPage:
        """
        Run a semantic search.

        The query is validated before any request is made.

        Args:
            query: Raw search text.

        Returns:
            ResultPage tagged SEMANTIC_SEARCH, with page, total pages and
            total exactly as the server declared them.

        Raises:
            SemanticQueryValidationError: If the query fails validation.
            AuthExpiredError: After the session has been terminated.
            SearchError: For any other failure, including success=false.
        """
        trimmed = validate_semantic_query(query)

        try:
            data = await self.source.ai_search(
                trimmed, settings.SEMANTIC_SEARCH_PAGE, settings.SEMANTIC_SEARCH_LIMIT
            )
        except AuthExpiredError:
            logger.warning("Session expired during semantic search")
            self.session.on_session_expired()
            raise
        except AcquisitionError as e:
            self.telemetry.record_failure("ai_search", e)
            raise SearchError(str(e), status_code=e.status_code) from e
        except Exception as e:
            self.telemetry.record_failure("ai_search", e)
            raise SearchError(str(e) or "An unexpected error occurred") from e

        if not data.get("success"):
            message = data.get("message") or "Search failed"
            error = SearchError(message)
            self.telemetry.record_failure("ai_search", error)
            raise error

        page = data.get("page")
        total_pages = data.get("totalPages")
        try:
            result = ResultPage(
                profiles=tuple(ProfileSummary.from_api(p) for p in data.get("profiles") or []),
                page=int(page) if page is not None else 1,
                total_pages=int(total_pages) if total_pages is not None else 1,
                mode=AcquisitionMode.SEMANTIC_SEARCH,
                total=int(data["total"]) if data.get("total") is not None else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            self.telemetry.record_failure("ai_search", e)
            raise SearchError("Search returned an unexpected response") from e

        self.last_query = trimmed
        logger.info(f"Semantic search '{trimmed}' returned {len(result.profiles)} profiles")
        return result
