"""
Engagement Metrics Module

This module derives engagement estimates for a profile from its sample of
recent posts. The reach, impression, reel-play and share figures come from
a fixed heuristic model with industry-average coefficients; they are not
fitted to data and carry no accuracy guarantee.
"""

from typing import Optional, Sequence

from data.models import EngagementMetrics, PostSample, ProfileDetail
from utils.helpers import round_half_up

# Share of followers reached by a typical post
REACH_RATE = 0.26
# Impressions per reached account
IMPRESSIONS_PER_REACH = 1.5
# Reel plays per reached account
REEL_PLAYS_PER_REACH = 0.43
# Shares per like
SHARES_PER_LIKE = 0.013


def compute(post_sample: Sequence[PostSample], followers_count: int) -> Optional[EngagementMetrics]:
    """
    Compute engagement metrics from a post sample.

    Args:
        post_sample: Recent posts with like and comment counts.
        followers_count: The profile's follower count. Values below 1 are
            treated as 1.

    Returns:
        EngagementMetrics, or None when the sample is empty.
    """
    posts_count = len(post_sample)
    if posts_count == 0:
        return None

    followers = followers_count if followers_count and followers_count > 0 else 1

    total_likes = sum(post.likes for post in post_sample)
    total_comments = sum(post.comments for post in post_sample)
    total_engagement = total_likes + total_comments

    average_likes = round_half_up(total_likes / posts_count)
    average_comments = round_half_up(total_comments / posts_count)
    engagement_rate = round_half_up(total_engagement / posts_count / followers * 100, 2)

    estimated_reach = round_half_up(followers * REACH_RATE)
    estimated_impressions = round_half_up(estimated_reach * IMPRESSIONS_PER_REACH)
    average_reel_plays = round_half_up(estimated_reach * REEL_PLAYS_PER_REACH)
    average_shares = round_half_up(average_likes * SHARES_PER_LIKE)

    return EngagementMetrics(
        engagement_rate=engagement_rate,
        estimated_reach=estimated_reach,
        estimated_impressions=estimated_impressions,
        average_likes=average_likes,
        average_comments=average_comments,
        average_reel_plays=average_reel_plays,
        average_shares=average_shares,
        total_likes=total_likes,
        total_comments=total_comments,
        total_engagement=total_engagement,
        posts_count=posts_count,
        followers=followers,
    )


def compute_for_profile(profile: ProfileDetail) -> Optional[EngagementMetrics]:
    """Compute engagement metrics for a full profile record."""
    return compute(profile.posts_sample, profile.followers_count)
