"""
Profile Dashboard Application

This is the main entry point for the Profile Dashboard command line.
It lists profiles through structured filters or a semantic search,
sorts the current page and shows a profile's detail with its
engagement estimates.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from config import settings
from config.filter_presets import (
    ANY_FOLLOWERS, ANY_POSTS, FOLLOWER_RANGES, POST_RANGES,
    apply_follower_range, apply_post_range
)
from config.validators import get_config_summary, validate_settings
from data.models import AcquisitionMode, FilterCriteria, ProfileSummary, SortField, SortOrder, SortSpec
from data.profile_api import ProfileAPIClient
from services.controller import DashboardState, SearchModeController
from services.detail_service import DetailService, DetailView
from services.listing_service import ListingService
from services.protocols import LoggingTelemetry
from services.search_service import SearchService
from utils.exceptions import ConfigurationError, SemanticQueryValidationError
from utils.helpers import format_number, format_post_date, truncate_text
from utils.logger import get_logger, setup_file_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_SESSION_EXPIRED = 3


class TokenSession:
    """Session backed by a token from the environment."""

    def __init__(self, token: Optional[str]):
        self._token = token
        self.expired = False

    def get_auth_token(self) -> Optional[str]:
        return self._token

    def on_session_expired(self) -> None:
        self._token = None
        self.expired = True
        logger.warning("Session expired. Set a new PROFILE_API_TOKEN and try again.")


def build_controller(api: ProfileAPIClient, session: TokenSession) -> SearchModeController:
    """Wire the services around a single API client."""
    telemetry = LoggingTelemetry()
    return SearchModeController(
        listing_service=ListingService(api, session, telemetry),
        search_service=SearchService(api, session, telemetry),
        detail_service=DetailService(api, session, telemetry),
    )


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    """Translate filter arguments into FilterCriteria."""
    criteria = FilterCriteria(
        username=args.username,
        full_name=args.full_name,
        is_verified=args.verified,
        min_followers=args.min_followers,
        max_followers=args.max_followers,
        min_posts=args.min_posts,
        max_posts=args.max_posts,
        category_name=args.category,
    )
    if args.followers:
        criteria = apply_follower_range(criteria, args.followers)
    if args.posts:
        criteria = apply_post_range(criteria, args.posts)
    return criteria


def render_listing(state: DashboardState, profiles: List[ProfileSummary]) -> str:
    """Format the current page as a text table."""
    result = state.result
    lines = []
    if state.mode is AcquisitionMode.SEMANTIC_SEARCH:
        lines.append(f"Found {result.total} profiles matching your AI search criteria")
    else:
        lines.append(f"Page {state.listing.page} of {result.total_pages}")

    if not profiles:
        lines.append("No profiles found.")
        return "\n".join(lines)

    lines.append(f"{'#':>3}  {'Username':<30} {'Followers':>10} {'Posts':>8} {'Eng.':>6}  Category")
    for index, profile in enumerate(profiles, start=1):
        engagement = f"{profile.engagement_rate:.1f}%" if profile.engagement_rate else "-"
        badge = "*" if profile.is_verified else " "
        lines.append(
            f"{index:>3}  {badge}{profile.username:<29} "
            f"{format_number(profile.followers_count):>10} "
            f"{format_number(profile.posts_count):>8} "
            f"{engagement:>6}  {profile.category_name or '-'}"
        )
    return "\n".join(lines)


def render_detail(view: DetailView) -> str:
    """Format a detail view, including the calculation details of its metrics."""
    profile = view.profile
    lines = [f"@{profile.username}" + (f" ({profile.full_name})" if profile.full_name else "")]
    flags = [name for name, on in (("verified", profile.is_verified), ("private", profile.is_private),
                                   ("business", profile.is_business_account)) if on]
    if flags:
        lines.append(", ".join(flags))
    lines.append(
        f"Followers {format_number(profile.followers_count)} | "
        f"Following {format_number(profile.following_count)} | "
        f"Posts {format_number(profile.posts_count)}"
    )

    detail = view.detail
    if view.is_fallback or detail is None:
        lines.append("(Full profile unavailable; showing listing data.)")
        return "\n".join(lines)

    if detail.biography:
        lines.append("")
        lines.append(truncate_text(detail.biography, 300))

    metrics = view.metrics
    if metrics:
        lines += [
            "",
            "Engagement",
            f"  Engagement rate:       {metrics.engagement_rate:.2f}%",
            f"  Estimated reach:       {format_number(metrics.estimated_reach)}",
            f"  Estimated impressions: {format_number(metrics.estimated_impressions)}",
            f"  Average likes:         {format_number(metrics.average_likes)}",
            f"  Average comments:      {metrics.average_comments}",
            f"  Average reel plays:    {format_number(metrics.average_reel_plays)}",
            f"  Average shares:        {metrics.average_shares}",
            f"  Sample: {metrics.total_likes:,} likes, {metrics.total_comments} comments "
            f"across {metrics.posts_count} posts",
        ]

    business = detail.business_info
    if business and (business.category_name or business.email or business.phone):
        lines += ["", "Business"]
        for label, value in (("Category", business.category_name), ("Email", business.email),
                             ("Phone", business.phone)):
            if value:
                lines.append(f"  {label}: {value}")

    if detail.bio_links:
        lines += ["", "Links"]
        for link in detail.bio_links:
            lines.append(f"  {link.title or link.url} <{link.url}>")

    if detail.posts_sample:
        lines += ["", "Recent posts"]
        for post in detail.posts_sample:
            kind = "video" if post.is_video else "photo"
            lines.append(f"  {format_post_date(post.timestamp)}  {kind:<5}  "
                         f"{format_number(post.likes)} likes  {post.comments} comments")

    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    """
    Run one dashboard session against the profile API.

    Returns:
        int: Process exit code.
    """
    session = TokenSession(settings.API_TOKEN)

    async with ProfileAPIClient(session) as api:
        controller = build_controller(api, session)

        if args.search:
            try:
                state = await controller.search(args.search)
            except SemanticQueryValidationError as e:
                logger.error(str(e))
                return EXIT_ERROR
            if state.search_error:
                logger.error(state.search_error)
                return EXIT_SESSION_EXPIRED if session.expired else EXIT_ERROR
        else:
            state = await controller.apply_filters(build_criteria(args), page=args.page)

        if session.expired:
            return EXIT_SESSION_EXPIRED
        if state.mode is AcquisitionMode.FILTERED and state.listing.error:
            logger.error(state.listing.error)
            return EXIT_ERROR

        if args.sort:
            field = SortField(args.sort)
            controller.sort_by(field)
            if args.order and controller.state.sort_spec.order is not SortOrder(args.order):
                controller.sort_by(field)

        profiles = controller.visible_profiles
        print(render_listing(controller.state, profiles))

        if args.detail:
            if not 1 <= args.detail <= len(profiles):
                logger.error(f"--detail must be between 1 and {len(profiles)}")
                return EXIT_ERROR
            view = await controller.select_profile(profiles[args.detail - 1])
            if view is None:
                return EXIT_SESSION_EXPIRED
            print()
            print(render_detail(view))

    return EXIT_OK


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Profile Dashboard')

    search = parser.add_argument_group('semantic search')
    search.add_argument('--search', type=str, help='Free-text semantic search (3-500 characters)')

    filters = parser.add_argument_group('filters')
    filters.add_argument('--username', type=str, help='Username contains')
    filters.add_argument('--full-name', type=str, help='Full name starts with')
    verified = filters.add_mutually_exclusive_group()
    verified.add_argument('--verified', dest='verified', action='store_const', const=True,
                          help='Verified accounts only')
    verified.add_argument('--not-verified', dest='verified', action='store_const', const=False,
                          help='Unverified accounts only')
    filters.add_argument('--min-followers', type=int)
    filters.add_argument('--max-followers', type=int)
    filters.add_argument('--followers', type=str,
                         choices=[ANY_FOLLOWERS] + [p.label for p in FOLLOWER_RANGES],
                         help='Follower range preset')
    filters.add_argument('--min-posts', type=int)
    filters.add_argument('--max-posts', type=int)
    filters.add_argument('--posts', type=str,
                         choices=[ANY_POSTS] + [p.label for p in POST_RANGES],
                         help='Post count range preset')
    filters.add_argument('--category', type=str, help='Category name')
    filters.add_argument('--page', type=int, default=1, help='Page of the filtered listing')

    view = parser.add_argument_group('display')
    view.add_argument('--sort', type=str, choices=[f.value for f in SortField], help='Sort column')
    view.add_argument('--order', type=str, choices=[o.value for o in SortOrder],
                      help='Sort order (defaults depend on the column)')
    view.add_argument('--detail', type=int, help='Show the detail of the Nth listed profile')

    parser.add_argument('--log-file', type=str, default=settings.LOG_FILE, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=settings.LOG_LEVEL if settings.LOG_LEVEL in
                        ('DEBUG', 'INFO', 'WARNING', 'ERROR') else 'INFO',
                        help='Logging level')

    args = parser.parse_args(argv)
    if args.page < 1:
        parser.error('--page must be 1 or greater')
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    try:
        validate_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG

    logger.info("Starting Profile Dashboard")
    logger.debug(f"Configuration: {get_config_summary()}")

    try:
        exit_code = asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Unhandled exception in Profile Dashboard: {e}", exc_info=True)
        exit_code = EXIT_ERROR

    logger.debug(f"Profile Dashboard finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
