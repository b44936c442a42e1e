"""
Data Models for the Profile Dashboard

This module contains data classes and models used throughout the application:
search criteria, profile records as returned by the profile API, result pages,
sort specifications and derived engagement metrics.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from utils.helpers import safe_get


# =============================================================================
# Search Criteria
# =============================================================================

@dataclass(frozen=True)
class FilterCriteria:
    """Structured constraints for the filtered profile listing.

    Unconstrained fields are None. Empty strings are stored as None so the
    record never carries a blank constraint.
    """
    username: Optional[str] = None         # Substring match
    full_name: Optional[str] = None        # Prefix match
    is_verified: Optional[bool] = None
    min_followers: Optional[int] = None
    max_followers: Optional[int] = None
    min_posts: Optional[int] = None
    max_posts: Optional[int] = None
    category_name: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, str):
                value = value.strip() or None
                object.__setattr__(self, f.name, value)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "FilterCriteria":
        """Build criteria from a loose mapping, rejecting unknown keys.

        Raises:
            ValueError: If the mapping contains a key that is not a filter.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown filter keys: {', '.join(sorted(unknown))}")
        return cls(**dict(values))

    def replace(self, **changes) -> "FilterCriteria":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_query_params(self) -> Dict[str, str]:
        """Serialize the set constraints as query-string parameters."""
        params = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool):
                params[f.name] = "true" if value else "false"
            else:
                params[f.name] = str(value)
        return params


# =============================================================================
# Profile Records
# =============================================================================

@dataclass(frozen=True)
class PostSample:
    """A recent post with its raw engagement counters."""
    id: str
    timestamp: int                     # Epoch seconds
    likes: int
    comments: int
    is_video: bool = False
    shortcode: Optional[str] = None
    post_url: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "PostSample":
        return cls(
            id=str(payload["id"]),
            timestamp=int(payload.get("timestamp") or 0),
            likes=int(payload.get("likes") or 0),
            comments=int(payload.get("comments") or 0),
            is_video=bool(payload.get("is_video", False)),
            shortcode=payload.get("shortcode"),
            post_url=payload.get("post_url"),
        )


@dataclass(frozen=True)
class BioLink:
    """A link listed in the profile biography."""
    url: str
    title: Optional[str] = None
    link_type: Optional[str] = None


@dataclass(frozen=True)
class BusinessInfo:
    """Business contact details published on the profile."""
    category_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class ProfileSummary:
    """Lightweight profile record shown in the listing."""
    id: str
    username: str
    full_name: str = ""
    profile_pic_url: Optional[str] = None
    is_verified: bool = False
    is_private: bool = False
    is_business_account: bool = False
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    engagement_rate: Optional[float] = None
    category_name: Optional[str] = None

    @property
    def display_engagement(self) -> float:
        """Engagement figure shown in the listing (precomputed rate, else 0)."""
        return self.engagement_rate if self.engagement_rate is not None else 0.0

    @staticmethod
    def _summary_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
        profile = payload.get("simplified_profile") or {}
        basic = profile.get("basic_info") or {}
        stats = profile.get("stats") or {}

        if "_id" not in payload and "id" not in payload:
            raise KeyError("_id")

        engagement_rate = stats.get("engagement_rate")
        return {
            "id": str(payload.get("_id", payload.get("id"))),
            "username": basic.get("username") or payload.get("username") or "",
            "full_name": basic.get("full_name") or "",
            "profile_pic_url": basic.get("profile_pic_url_hd") or basic.get("profile_pic_url"),
            "is_verified": bool(basic.get("is_verified", False)),
            "is_private": bool(basic.get("is_private", False)),
            "is_business_account": bool(basic.get("is_business_account", False)),
            "followers_count": int(stats.get("followers_count") or 0),
            "following_count": int(stats.get("following_count") or 0),
            "posts_count": int(stats.get("posts_count") or 0),
            "engagement_rate": float(engagement_rate) if engagement_rate is not None else None,
            "category_name": safe_get(profile, "business_info", "category_name"),
        }

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ProfileSummary":
        """Parse a profile document as returned by GET /profiles.

        Raises:
            KeyError, TypeError, ValueError: If the document is malformed.
        """
        return cls(**cls._summary_fields(payload))


@dataclass(frozen=True)
class ProfileDetail(ProfileSummary):
    """Full profile record including biography, business info and recent posts."""
    biography: str = ""
    external_url: Optional[str] = None
    business_info: Optional[BusinessInfo] = None
    bio_links: Tuple[BioLink, ...] = ()
    posts_sample: Tuple[PostSample, ...] = ()
    fetched_at: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ProfileDetail":
        """Parse a profile document as returned by GET /profiles/:id."""
        profile = payload.get("simplified_profile") or {}
        basic = profile.get("basic_info") or {}

        business = profile.get("business_info")
        business_info = None
        if business:
            business_info = BusinessInfo(
                category_name=business.get("category_name"),
                email=business.get("email"),
                phone=business.get("phone"),
                address=business.get("address"),
            )

        bio_links = tuple(
            BioLink(url=link["url"], title=link.get("title"), link_type=link.get("link_type"))
            for link in profile.get("bio_links") or []
            if link.get("url")
        )

        posts = safe_get(profile, "media_info", "timeline_media", "posts_sample", default=[])

        return cls(
            **cls._summary_fields(payload),
            biography=basic.get("biography") or "",
            external_url=basic.get("external_url"),
            business_info=business_info,
            bio_links=bio_links,
            posts_sample=tuple(PostSample.from_api(p) for p in posts),
            fetched_at=safe_get(payload, "metadata", "fetched_at"),
        )


# =============================================================================
# Result Pages
# =============================================================================

class AcquisitionMode(Enum):
    """How the current result set was acquired."""
    FILTERED = "filtered"
    SEMANTIC_SEARCH = "semantic_search"


@dataclass(frozen=True)
class ResultPage:
    """One page of profiles as presented in the listing."""
    profiles: Tuple[ProfileSummary, ...]
    page: int
    total_pages: int
    mode: AcquisitionMode
    total: Optional[int] = None

    @classmethod
    def empty(cls) -> "ResultPage":
        """The page shown after a failed listing: one page, no profiles."""
        return cls(profiles=(), page=1, total_pages=1, mode=AcquisitionMode.FILTERED, total=0)


# =============================================================================
# Sorting
# =============================================================================

class SortField(Enum):
    USERNAME = "username"
    FOLLOWERS = "followers"
    POSTS = "posts"
    ENGAGEMENT = "engagement"
    CATEGORY = "category"


class SortOrder(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def toggled(self) -> "SortOrder":
        if self is SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING


@dataclass(frozen=True)
class SortSpec:
    field: SortField
    order: SortOrder


# =============================================================================
# Engagement Metrics
# =============================================================================

@dataclass(frozen=True)
class EngagementMetrics:
    """Heuristic engagement estimates derived from a recent-post sample.

    Never persisted; computed fresh for each detail view.
    """
    engagement_rate: float             # Percent, two decimals
    estimated_reach: int
    estimated_impressions: int
    average_likes: int
    average_comments: int
    average_reel_plays: int
    average_shares: int
    # Raw figures behind the estimates
    total_likes: int
    total_comments: int
    total_engagement: int
    posts_count: int
    followers: int
