"""
Search Mode Controller Module

This module owns the dashboard's presentation state. It reconciles the two
acquisition modes (filtered pagination and one-shot semantic search), the
client-side sort and the detail panel into a single immutable snapshot that
is replaced on every transition.

Requests are tagged with a per-mode sequence number. A completion is applied
only while its number is still the latest issued for its mode and the
controller is still in that mode, so a slow response can never overwrite
newer state.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, ClassVar, Dict, List, Optional, Union

from data.models import (
    AcquisitionMode, FilterCriteria, ProfileSummary, ResultPage, SortField, SortSpec
)
from services.detail_service import DetailService, DetailView
from services.listing_service import ListingService
from services.search_service import SearchService, validate_semantic_query
from services.sorting import next_sort_spec, sort_profiles
from utils.exceptions import AcquisitionError, AuthExpiredError
from utils.logger import get_logger

logger = get_logger(__name__)

SEARCH_ERROR_PREFIX = "AI Search Error: "


@dataclass(frozen=True)
class FilteredState:
    """Listing driven by structured filters with page-based pagination."""
    mode: ClassVar[AcquisitionMode] = AcquisitionMode.FILTERED

    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    page: int = 1
    result: ResultPage = field(default_factory=ResultPage.empty)
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class SemanticSearchState:
    """Listing holding the one-shot result of a semantic search."""
    mode: ClassVar[AcquisitionMode] = AcquisitionMode.SEMANTIC_SEARCH

    result: ResultPage
    query: Optional[str] = None


ListingState = Union[FilteredState, SemanticSearchState]


@dataclass(frozen=True)
class DashboardState:
    """Everything the listing and detail views render."""
    listing: ListingState = field(default_factory=FilteredState)
    sort_spec: Optional[SortSpec] = None
    search_input: str = ""
    searching: bool = False
    search_error: Optional[str] = None
    detail: Optional[DetailView] = None
    detail_loading: bool = False

    @property
    def mode(self) -> AcquisitionMode:
        return self.listing.mode

    @property
    def result(self) -> ResultPage:
        return self.listing.result


Listener = Callable[[DashboardState], None]


class SearchModeController:
    """State machine composing listing, semantic search and detail resolution."""

    def __init__(
        self,
        listing_service: ListingService,
        search_service: SearchService,
        detail_service: DetailService,
    ):
        self.listing_service = listing_service
        self.search_service = search_service
        self.detail_service = detail_service

        self.state = DashboardState()
        self._sequence: Dict[AcquisitionMode, int] = {mode: 0 for mode in AcquisitionMode}
        self._detail_sequence = 0
        self._listeners: List[Listener] = []

    # -------------------------------------------------------------------------
    # State plumbing
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with every new state snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: DashboardState) -> DashboardState:
        self.state = state
        for listener in list(self._listeners):
            listener(state)
        return state

    def _issue(self, mode: AcquisitionMode) -> int:
        self._sequence[mode] += 1
        return self._sequence[mode]

    def _invalidate(self, mode: AcquisitionMode) -> None:
        self._sequence[mode] += 1

    def _is_current(self, mode: AcquisitionMode, sequence: int) -> bool:
        return self._sequence[mode] == sequence and self.state.mode is mode

    @property
    def visible_profiles(self) -> List[ProfileSummary]:
        """The current page's profiles in display order."""
        return sort_profiles(self.state.result.profiles, self.state.sort_spec)

    # -------------------------------------------------------------------------
    # Filtered mode
    # -------------------------------------------------------------------------

    def _enter_filtered(self, criteria: FilterCriteria, page: int) -> None:
        # Any pending search is superseded by an explicit listing request
        self._invalidate(AcquisitionMode.SEMANTIC_SEARCH)
        current = self.state.listing
        if isinstance(current, FilteredState):
            listing = replace(current, criteria=criteria, page=page)
        else:
            listing = FilteredState(criteria=criteria, page=page)
        self._set_state(replace(self.state, listing=listing, searching=False))

    async def _load_listing(self) -> DashboardState:
        mode = AcquisitionMode.FILTERED
        sequence = self._issue(mode)
        before = self.state
        listing = before.listing
        self._set_state(replace(
            self.state,
            listing=replace(listing, loading=True, error=None),
            searching=False,
            search_error=None,
        ))

        try:
            result = await self.listing_service.fetch(listing.page, listing.criteria)
        except AuthExpiredError:
            # Only the listing is rolled back; detail and sort may have moved on
            if self._is_current(mode, sequence):
                self._set_state(replace(self.state, listing=before.listing))
            return self.state
        except AcquisitionError as e:
            if not self._is_current(mode, sequence):
                logger.debug(f"Discarding stale listing failure #{sequence}")
                return self.state
            return self._set_state(replace(
                self.state,
                listing=replace(self.state.listing, result=ResultPage.empty(),
                                loading=False, error=e.user_message),
            ))

        if not self._is_current(mode, sequence):
            logger.debug(f"Discarding stale listing response #{sequence}")
            return self.state

        return self._set_state(replace(
            self.state,
            listing=replace(self.state.listing, result=result, page=result.page, loading=False),
        ))

    async def apply_filters(self, criteria: FilterCriteria, page: int = 1) -> DashboardState:
        """
        Filter the listing with a single fetch.

        New filters restart from page 1. Callers that already know the page
        they want (the command line's --page) pass it to avoid a second fetch.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        logger.info(f"Applying filters: {criteria.to_query_params() or 'none'} (page {page})")
        self._enter_filtered(criteria, page=page)
        return await self._load_listing()

    async def clear_filters(self) -> DashboardState:
        """Drop every filter and reload page 1."""
        return await self.apply_filters(FilterCriteria())

    async def change_page(self, page: int) -> DashboardState:
        """
        Move to another page of the filtered listing.

        Semantic search results are not paginated, so in that mode this does
        nothing and returns the unchanged state.
        """
        if self.state.mode is AcquisitionMode.SEMANTIC_SEARCH:
            logger.info("Pagination is not available for semantic search results")
            return self.state
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        self._enter_filtered(self.state.listing.criteria, page=page)
        return await self._load_listing()

    async def refresh(self) -> DashboardState:
        """
        Re-issue the listing fetch.

        From semantic search mode this returns to the filtered listing with
        the last known (cleared) criteria and the page the search reported.
        """
        listing = self.state.listing
        if isinstance(listing, SemanticSearchState):
            self._enter_filtered(FilterCriteria(), page=max(listing.result.page, 1))
        else:
            # A pending search is superseded here as well
            self._invalidate(AcquisitionMode.SEMANTIC_SEARCH)
        return await self._load_listing()

    # -------------------------------------------------------------------------
    # Semantic search mode
    # -------------------------------------------------------------------------

    async def search(self, query: str) -> DashboardState:
        """
        Run a semantic search and switch to its results on success.

        Raises:
            SemanticQueryValidationError: Before any request, leaving the
                state untouched.
        """
        validate_semantic_query(query)

        mode = AcquisitionMode.SEMANTIC_SEARCH
        sequence = self._issue(mode)
        self._set_state(replace(self.state, search_input=query, searching=True, search_error=None))

        try:
            result = await self.search_service.fetch(query)
        except AuthExpiredError:
            if self._sequence[mode] == sequence:
                self._set_state(replace(self.state, searching=False))
            return self.state
        except AcquisitionError as e:
            if self._sequence[mode] != sequence:
                logger.debug(f"Discarding stale search failure #{sequence}")
                return self.state
            logger.error(f"Semantic search failed: {e}")
            return self._set_state(replace(
                self.state, searching=False, search_error=SEARCH_ERROR_PREFIX + e.user_message
            ))

        if self._sequence[mode] != sequence:
            logger.debug(f"Discarding stale search response #{sequence}")
            return self.state

        return self.submit_semantic_query(result, query=self.search_service.last_query)

    def submit_semantic_query(self, result: ResultPage, query: Optional[str] = None) -> DashboardState:
        """
        Switch to semantic search mode with a completed search result.

        The result replaces the presented page wholesale, including its page
        number and totals. Filters are cleared and any pending listing or
        search request is invalidated.
        """
        if result.mode is not AcquisitionMode.SEMANTIC_SEARCH:
            raise ValueError(f"Expected a semantic search result, got {result.mode.value}")

        self._invalidate(AcquisitionMode.FILTERED)
        self._invalidate(AcquisitionMode.SEMANTIC_SEARCH)
        logger.info(f"Showing {len(result.profiles)} semantic search results (total: {result.total})")
        return self._set_state(replace(
            self.state,
            listing=SemanticSearchState(result=result, query=query),
            search_input="",
            searching=False,
            search_error=None,
        ))

    # -------------------------------------------------------------------------
    # Sorting, errors and detail
    # -------------------------------------------------------------------------

    def sort_by(self, sort_field: SortField) -> DashboardState:
        """Select a sort column, toggling its order if it is already active."""
        return self._set_state(replace(
            self.state, sort_spec=next_sort_spec(self.state.sort_spec, sort_field)
        ))

    def dismiss_error(self) -> DashboardState:
        listing = self.state.listing
        if isinstance(listing, FilteredState):
            listing = replace(listing, error=None)
        return self._set_state(replace(self.state, listing=listing, search_error=None))

    async def select_profile(self, summary: ProfileSummary) -> Optional[DetailView]:
        """
        Open the detail panel for a listed profile.

        Runs independently of listing and search requests. Returns the view
        that was shown, or None if the session expired or a newer selection
        superseded this one.
        """
        self._detail_sequence += 1
        sequence = self._detail_sequence
        self._set_state(replace(self.state, detail_loading=True))

        try:
            view = await self.detail_service.resolve(summary)
        except AuthExpiredError:
            if sequence == self._detail_sequence:
                self._set_state(replace(self.state, detail_loading=False))
            return None

        if sequence != self._detail_sequence:
            logger.debug(f"Discarding stale detail for {summary.username}")
            return None

        self._set_state(replace(self.state, detail=view, detail_loading=False))
        return view

    def close_detail(self) -> DashboardState:
        self._detail_sequence += 1
        return self._set_state(replace(self.state, detail=None, detail_loading=False))
