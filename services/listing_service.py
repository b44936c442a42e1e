"""
Listing Service Module

This module fetches the filtered, paginated profile listing.
"""

from typing import Optional

from config import settings
from data.models import AcquisitionMode, FilterCriteria, ProfileSummary, ResultPage
from data.protocols import ProfileSource
from services.protocols import LoggingTelemetry, SessionManager, TelemetrySink
from utils.exceptions import AcquisitionError, AuthExpiredError
from utils.logger import get_logger

logger = get_logger(__name__)

LISTING_ERROR_MESSAGE = "Failed to load profiles. Please try again."


class ListingService:
    """Acquires one page of profiles matching a FilterCriteria."""

    def __init__(
        self,
        source: ProfileSource,
        session: SessionManager,
        telemetry: Optional[TelemetrySink] = None,
        page_size: Optional[int] = None,
    ):
        self.source = source
        self.session = session
        self.telemetry = telemetry or LoggingTelemetry()
        self.page_size = page_size or settings.LISTING_PAGE_SIZE

    async def fetch(self, page: int, criteria: FilterCriteria) -> ResultPage:
        """
        Fetch one page of the filtered listing.

        Args:
            page: 1-based page number.
            criteria: Filters to apply; unset fields are left out of the query.

        Returns:
            ResultPage tagged FILTERED.

        Raises:
            AuthExpiredError: After the session has been terminated.
            AcquisitionError: For any other failure, with a user-facing message.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        filters = criteria.to_query_params()
        try:
            data = await self.source.list_profiles(page, self.page_size, filters)
            profiles = tuple(ProfileSummary.from_api(p) for p in data.get("profiles") or [])
            total_pages = int(data.get("totalPages") or 1)
            total = data.get("total")
            total = int(total) if total is not None else None
        except AuthExpiredError:
            logger.warning("Session expired while loading profiles")
            self.session.on_session_expired()
            raise
        except Exception as e:
            logger.error(f"Failed to fetch profiles: {e}")
            self.telemetry.record_failure("list_profiles", e)
            status_code = getattr(e, "status_code", None)
            raise AcquisitionError(str(e), status_code=status_code,
                                   user_message=LISTING_ERROR_MESSAGE) from e

        if filters:
            logger.debug(f"Applied filters: {filters} (total results: {total})")

        return ResultPage(
            profiles=profiles,
            page=page,
            total_pages=total_pages,
            mode=AcquisitionMode.FILTERED,
            total=total,
        )
