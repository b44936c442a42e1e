"""
Tests for the Engagement Metrics Calculator

Tests cover the fixed heuristic model, rounding behaviour and the
empty-sample and zero-follower edge cases.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import PostSample, ProfileDetail
from services.engagement import (
    compute, compute_for_profile,
    REACH_RATE, IMPRESSIONS_PER_REACH, REEL_PLAYS_PER_REACH, SHARES_PER_LIKE
)


def make_posts(*counts):
    """Build PostSample records from (likes, comments) pairs."""
    return [
        PostSample(id=f"p{i}", timestamp=1700000000 + i, likes=likes, comments=comments)
        for i, (likes, comments) in enumerate(counts)
    ]


# =============================================================================
# Model Tests
# =============================================================================

class TestCompute:
    """Tests for compute()."""

    def test_two_post_reference_sample(self):
        """Two posts at 10,000 followers produce the documented figures."""
        metrics = compute(make_posts((100, 10), (200, 20)), 10000)

        assert metrics.average_likes == 150
        assert metrics.average_comments == 15
        assert metrics.engagement_rate == 1.65
        assert metrics.estimated_reach == 2600
        assert metrics.estimated_impressions == 3900
        assert metrics.average_reel_plays == 1118
        assert metrics.average_shares == 2

    def test_raw_figures_are_kept(self):
        """The sample totals behind the estimates are exposed."""
        metrics = compute(make_posts((100, 10), (200, 20)), 10000)

        assert metrics.total_likes == 300
        assert metrics.total_comments == 30
        assert metrics.total_engagement == 330
        assert metrics.posts_count == 2
        assert metrics.followers == 10000

    def test_empty_sample_returns_none(self):
        """No posts means no metrics, never a division by zero."""
        assert compute([], 10000) is None

    def test_empty_sample_with_zero_followers_returns_none(self):
        assert compute([], 0) is None

    def test_zero_followers_treated_as_one(self):
        """A zero follower count does not raise and is treated as one follower."""
        metrics = compute(make_posts((3, 1)), 0)

        assert metrics.followers == 1
        assert metrics.engagement_rate == 400.0
        assert metrics.estimated_reach == 0

    def test_averages_round_half_up(self):
        """Halves round up rather than to the nearest even number."""
        metrics = compute(make_posts((1, 1), (2, 2)), 1000)

        # 3 / 2 = 1.5 in both cases
        assert metrics.average_likes == 2
        assert metrics.average_comments == 2

    def test_engagement_rate_has_two_decimals(self):
        metrics = compute(make_posts((1, 0), (0, 0), (0, 0)), 3000)

        # 1 / 3 / 3000 * 100 = 0.0111...
        assert metrics.engagement_rate == 0.01

    def test_estimates_chain_from_reach(self):
        """Impressions and reel plays are derived from the rounded reach."""
        followers = 12345
        metrics = compute(make_posts((50, 5)), followers)

        reach = round(followers * REACH_RATE)
        assert metrics.estimated_reach == reach
        assert metrics.estimated_impressions == int(reach * IMPRESSIONS_PER_REACH + 0.5)
        assert metrics.average_reel_plays == int(reach * REEL_PLAYS_PER_REACH + 0.5)

    def test_shares_derive_from_average_likes(self):
        metrics = compute(make_posts((1000, 0)), 50000)

        assert metrics.average_shares == int(1000 * SHARES_PER_LIKE + 0.5)

    @pytest.mark.parametrize("coefficient, expected", [
        (REACH_RATE, 0.26),
        (IMPRESSIONS_PER_REACH, 1.5),
        (REEL_PLAYS_PER_REACH, 0.43),
        (SHARES_PER_LIKE, 0.013),
    ])
    def test_model_coefficients_are_fixed(self, coefficient, expected):
        assert coefficient == expected


class TestComputeForProfile:
    """Tests for compute_for_profile()."""

    def test_uses_profile_sample_and_followers(self):
        profile = ProfileDetail(
            id="1", username="alice", followers_count=10000,
            posts_sample=tuple(make_posts((100, 10), (200, 20))),
        )

        metrics = compute_for_profile(profile)

        assert metrics.engagement_rate == 1.65

    def test_profile_without_posts_has_no_metrics(self):
        profile = ProfileDetail(id="1", username="alice", followers_count=10000)

        assert compute_for_profile(profile) is None
