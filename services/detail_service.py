"""
Profile Detail Service Module

Resolves the full record for a profile selected in the listing. The detail
panel always has something to show: when the full record cannot be loaded
the summary already on screen is used instead.
"""

from dataclasses import dataclass
from typing import Optional

from data.models import EngagementMetrics, ProfileDetail, ProfileSummary
from data.protocols import ProfileSource
from services.engagement import compute_for_profile
from services.protocols import LoggingTelemetry, SessionManager, TelemetrySink
from utils.exceptions import AuthExpiredError, DetailResolutionError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DetailView:
    """What the detail panel renders for a selected row."""
    profile: ProfileSummary
    metrics: Optional[EngagementMetrics] = None
    is_fallback: bool = False

    @property
    def detail(self) -> Optional[ProfileDetail]:
        """The full record, or None when showing the fallback summary."""
        if isinstance(self.profile, ProfileDetail):
            return self.profile
        return None


class DetailService:
    """Fetches full profile records with fallback to the listing summary."""

    def __init__(
        self,
        source: ProfileSource,
        session: SessionManager,
        telemetry: Optional[TelemetrySink] = None,
    ):
        self.source = source
        self.session = session
        self.telemetry = telemetry or LoggingTelemetry()

    async def _load(self, profile_id: str) -> ProfileDetail:
        data = await self.source.get_profile(profile_id)
        payload = data.get("profile")
        if not isinstance(payload, dict):
            raise DetailResolutionError(f"No profile document for {profile_id}")
        try:
            return ProfileDetail.from_api(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise DetailResolutionError(f"Malformed profile document for {profile_id}: {e}") from e

    async def resolve(self, summary: ProfileSummary) -> DetailView:
        """
        Resolve the detail view for a listed profile.

        Args:
            summary: The row the user selected.

        Returns:
            DetailView with the full record and its engagement metrics, or a
            fallback view of the summary.

        Raises:
            AuthExpiredError: After the session has been terminated.
        """
        try:
            detail = await self._load(summary.id)
        except AuthExpiredError:
            logger.warning(f"Session expired while loading profile {summary.id}")
            self.session.on_session_expired()
            raise
        except Exception as e:
            logger.error(f"Failed to fetch profile details for {summary.username}: {e}")
            self.telemetry.record_failure("get_profile", e)
            return DetailView(profile=summary, is_fallback=True)

        return DetailView(profile=detail, metrics=compute_for_profile(detail))
