"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for data layer operations.
These protocols enable dependency injection for the profile API,
making services testable without a live server.

Protocols defined:
- ProfileSource: Interface for reading profile documents
"""

from typing import Any, Dict, Protocol


class ProfileSource(Protocol):
    """Protocol defining the interface for profile document retrieval.

    Implementations should provide coroutines for:
    - Listing profiles a page at a time with optional filters
    - Running a one-shot semantic search
    - Fetching a single full profile

    Every method returns the decoded JSON body. Implementations raise
    AuthExpiredError when the credential is rejected, AcquisitionError for
    other non-2xx or transport failures and MalformedResponseError when the
    body is not a JSON object.
    """

    async def list_profiles(self, page: int, limit: int,
                            filters: Dict[str, str]) -> Dict[str, Any]:
        """List profiles matching the given filters.

        Args:
            page: 1-based page number.
            limit: Page size.
            filters: Already-serialized filter parameters.

        Returns:
            Body with 'profiles', 'totalPages' and 'total'.
        """
        ...

    async def ai_search(self, query: str, page: int, limit: int) -> Dict[str, Any]:
        """Run a free-text semantic search.

        Args:
            query: Trimmed search text.
            page: Requested page.
            limit: Maximum number of ranked results.

        Returns:
            Body with 'success', 'profiles', 'totalPages', 'page', 'total'
            and optionally 'message'.
        """
        ...

    async def get_profile(self, profile_id: str) -> Dict[str, Any]:
        """Fetch a single full profile.

        Args:
            profile_id: The profile's identifier.

        Returns:
            Body with a 'profile' document.
        """
        ...
