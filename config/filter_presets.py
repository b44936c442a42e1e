"""
Filter Range Presets for the Profile Dashboard

This module contains the follower-count and post-count ranges offered as
quick filters, and helpers to apply them to a FilterCriteria.
Kept apart from settings.py to separate data from configuration logic.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from data.models import FilterCriteria

ANY_FOLLOWERS = "Any Followers"
ANY_POSTS = "Any Posts"


@dataclass(frozen=True)
class RangePreset:
    label: str
    min_value: Optional[int]
    max_value: Optional[int]


# Follower ranges
FOLLOWER_RANGES: Tuple[RangePreset, ...] = (
    RangePreset("Less than 1K", 0, 999),
    RangePreset("1K - 10K", 1000, 9999),
    RangePreset("10K - 50K", 10000, 49999),
    RangePreset("50K - 100K", 50000, 99999),
    RangePreset("100K - 500K", 100000, 499999),
    RangePreset("500K+", 500000, None),
)

# Post ranges
POST_RANGES: Tuple[RangePreset, ...] = (
    RangePreset("Less than 10", 0, 9),
    RangePreset("10 - 50", 10, 49),
    RangePreset("50 - 100", 50, 99),
    RangePreset("100 - 500", 100, 499),
    RangePreset("500+", 500, None),
)


def _find(presets: Tuple[RangePreset, ...], label: str) -> RangePreset:
    for preset in presets:
        if preset.label == label:
            return preset
    raise ValueError(f"Unknown range preset: {label!r}")


def apply_follower_range(criteria: FilterCriteria, label: str) -> FilterCriteria:
    """
    Replace the follower bounds of the criteria with a preset.

    Args:
        criteria: Current criteria.
        label: A FOLLOWER_RANGES label, or ANY_FOLLOWERS to drop the bounds.

    Returns:
        FilterCriteria: New criteria; the input is unchanged.
    """
    if label == ANY_FOLLOWERS:
        return criteria.replace(min_followers=None, max_followers=None)
    preset = _find(FOLLOWER_RANGES, label)
    return criteria.replace(min_followers=preset.min_value, max_followers=preset.max_value)


def apply_post_range(criteria: FilterCriteria, label: str) -> FilterCriteria:
    """Replace the post-count bounds of the criteria with a preset (or ANY_POSTS)."""
    if label == ANY_POSTS:
        return criteria.replace(min_posts=None, max_posts=None)
    preset = _find(POST_RANGES, label)
    return criteria.replace(min_posts=preset.min_value, max_posts=preset.max_value)


def current_follower_range(criteria: FilterCriteria) -> str:
    """Label of the follower preset matching the criteria, else ANY_FOLLOWERS."""
    for preset in FOLLOWER_RANGES:
        if (preset.min_value, preset.max_value) == (criteria.min_followers, criteria.max_followers):
            return preset.label
    return ANY_FOLLOWERS


def current_post_range(criteria: FilterCriteria) -> str:
    """Label of the post preset matching the criteria, else ANY_POSTS."""
    for preset in POST_RANGES:
        if (preset.min_value, preset.max_value) == (criteria.min_posts, criteria.max_posts):
            return preset.label
    return ANY_POSTS
