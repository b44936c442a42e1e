"""
Shared Test Fixtures for the Profile Dashboard

This module provides common fixtures used across all test modules.
Fixtures include a scriptable in-memory profile source, session and
telemetry mocks, httpx mock transports, and data factories for API
payloads and model objects.
"""

import asyncio
import pytest
from unittest.mock import MagicMock
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Payload Factories
# =============================================================================

@pytest.fixture
def post_payload_factory():
    """
    Factory fixture for creating posts_sample entries as the API returns them.

    Usage:
        def test_posts(post_payload_factory):
            post = post_payload_factory(likes=100, comments=10)
    """
    counter = {"n": 0}

    def _create_post(
        likes: int = 100,
        comments: int = 10,
        is_video: bool = False,
        timestamp: int = 1700000000,
        post_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        return {
            "id": post_id or f"post-{counter['n']}",
            "shortcode": f"SC{counter['n']}",
            "post_url": f"https://www.instagram.com/p/SC{counter['n']}/",
            "media_link": "https://cdn.example.com/media.jpg",
            "is_video": is_video,
            "timestamp": timestamp,
            "likes": likes,
            "comments": comments,
        }

    return _create_post


@pytest.fixture
def profile_payload_factory():
    """
    Factory fixture for creating profile documents as the API returns them.

    Usage:
        def test_profile(profile_payload_factory):
            doc = profile_payload_factory(username='alice', followers=5000)

    Returns:
        callable: A factory producing nested simplified_profile documents.
    """
    def _create_profile(
        profile_id: str = "64f0c0ffee0000000000000a",
        username: str = "testuser",
        full_name: str = "Test User",
        followers: int = 10000,
        following: int = 300,
        posts: int = 120,
        engagement_rate: Optional[float] = None,
        category: Optional[str] = None,
        is_verified: bool = False,
        biography: str = "",
        posts_sample: Optional[List[Dict[str, Any]]] = None,
        bio_links: Optional[List[Dict[str, Any]]] = None,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        stats = {
            "followers_count": followers,
            "following_count": following,
            "posts_count": posts,
        }
        if engagement_rate is not None:
            stats["engagement_rate"] = engagement_rate

        profile = {
            "basic_info": {
                "username": username,
                "full_name": full_name,
                "biography": biography,
                "profile_pic_url": f"https://cdn.example.com/{username}.jpg",
                "is_verified": is_verified,
                "is_private": False,
                "is_business_account": category is not None,
            },
            "stats": stats,
        }
        if category is not None or email is not None:
            profile["business_info"] = {"category_name": category, "email": email}
        if bio_links is not None:
            profile["bio_links"] = bio_links
        if posts_sample is not None:
            profile["media_info"] = {
                "timeline_media": {
                    "count": posts,
                    "has_next_page": True,
                    "posts_sample": posts_sample,
                }
            }

        return {
            "_id": profile_id,
            "username": username,
            "metadata": {"fetched_at": "2024-01-15T10:00:00Z", "data_type": "profile"},
            "simplified_profile": profile,
        }

    return _create_profile


@pytest.fixture
def profile_summary_factory():
    """Factory fixture for creating ProfileSummary objects."""
    from data.models import ProfileSummary

    counter = {"n": 0}

    def _create_summary(username: Optional[str] = None, **overrides) -> ProfileSummary:
        counter["n"] += 1
        values = {
            "id": f"id-{counter['n']}",
            "username": username or f"user{counter['n']}",
            "full_name": "Test User",
            "followers_count": 1000,
            "posts_count": 10,
        }
        values.update(overrides)
        return ProfileSummary(**values)

    return _create_summary


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def mock_session():
    """
    Mock SessionManager collaborator.

    get_auth_token returns "test-token"; on_session_expired calls can be
    asserted on.
    """
    session = MagicMock(spec=["get_auth_token", "on_session_expired"])
    session.get_auth_token.return_value = "test-token"
    return session


@pytest.fixture
def mock_telemetry():
    """Mock TelemetrySink collaborator."""
    return MagicMock(spec=["record_failure"])


class _Gated:
    """A scripted response released only when its event is set."""

    def __init__(self, event: asyncio.Event, response: Any):
        self.event = event
        self.response = response


class FakeProfileSource:
    """
    In-memory ProfileSource with scripted responses.

    Each method pops the next queued item: a dict is returned, an exception
    instance is raised. When the queue is empty the method's default is used.
    """

    def __init__(self):
        self.calls: Dict[str, List[tuple]] = {"list_profiles": [], "ai_search": [], "get_profile": []}
        self.responses: Dict[str, List[Any]] = {"list_profiles": [], "ai_search": [], "get_profile": []}
        self.defaults: Dict[str, Any] = {
            "list_profiles": {"profiles": [], "totalPages": 1, "total": 0},
            "ai_search": {"success": True, "profiles": [], "totalPages": 1, "page": 1, "total": 0},
            "get_profile": {"profile": None},
        }

    def queue(self, method: str, *responses: Any) -> None:
        self.responses[method].extend(responses)

    def gate(self, method: str, response: Any) -> asyncio.Event:
        """Queue a response held back until the returned event is set.

        Must be called from inside a running event loop.
        """
        event = asyncio.Event()
        self.responses[method].append(_Gated(event, response))
        return event

    async def _respond(self, method: str, args: tuple) -> Dict[str, Any]:
        self.calls[method].append(args)
        queue = self.responses[method]
        item = queue.pop(0) if queue else self.defaults[method]
        if isinstance(item, _Gated):
            await item.event.wait()
            item = item.response
        if isinstance(item, BaseException):
            raise item
        return item

    async def list_profiles(self, page, limit, filters):
        return await self._respond("list_profiles", (page, limit, dict(filters)))

    async def ai_search(self, query, page, limit):
        return await self._respond("ai_search", (query, page, limit))

    async def get_profile(self, profile_id):
        return await self._respond("get_profile", (profile_id,))


@pytest.fixture
def fake_source():
    """A fresh FakeProfileSource."""
    return FakeProfileSource()


@pytest.fixture
def controller(fake_source, mock_session, mock_telemetry):
    """SearchModeController wired to the fake source."""
    from services.controller import SearchModeController
    from services.detail_service import DetailService
    from services.listing_service import ListingService
    from services.search_service import SearchService

    return SearchModeController(
        listing_service=ListingService(fake_source, mock_session, mock_telemetry),
        search_service=SearchService(fake_source, mock_session, mock_telemetry),
        detail_service=DetailService(fake_source, mock_session, mock_telemetry),
    )


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def mock_transport():
    """
    Factory fixture for httpx.MockTransport-backed clients.

    The handler receives each httpx.Request; every request is also
    appended to the returned list for inspection.

    Usage:
        def test_call(mock_transport):
            client, requests = mock_transport(lambda r: httpx.Response(200, json={}))
    """
    import httpx

    def _create(handler):
        requests = []

        def _record(request):
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return client, requests

    return _create


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging
    from utils.logger import log

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)
    log.addHandler(handler)

    yield handler.records

    log.removeHandler(handler)
