"""
Profile API Module

This module handles all HTTP communication with the profile API.
It provides an async client that attaches the bearer credential, maps
HTTP failures onto the application's exception taxonomy and returns
decoded JSON bodies.
"""

from typing import Any, Dict, Optional

import httpx

from config import settings
from services.protocols import SessionManager
from utils.exceptions import AcquisitionError, AuthExpiredError, MalformedResponseError
from utils.logger import get_logger

logger = get_logger(__name__)


class ProfileAPIClient:
    """Async client for the profile API. Implements data.protocols.ProfileSource."""

    def __init__(
        self,
        session: SessionManager,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the API client.

        Args:
            session: Supplies the bearer token for each request.
            base_url: API root; defaults to settings.API_BASE_URL.
            client: Pre-built httpx client (tests inject one with a MockTransport).
        """
        self.session = session
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT)
        self.client = client
        self._owns_client = client is None

    async def start(self) -> None:
        """Open the underlying HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
            logger.info(f"Profile API client initialized for {self.base_url}")

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance opened it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            logger.info("Profile API client closed")

    async def __aenter__(self) -> "ProfileAPIClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session.get_auth_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Issue a GET request and return the decoded JSON object.

        Raises:
            AuthExpiredError: On HTTP 401.
            AcquisitionError: On any other non-2xx status or a transport failure.
            MalformedResponseError: If the body is not a JSON object.
        """
        if self.client is None:
            await self.start()

        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(url, params=params, headers=self._headers())
        except httpx.RequestError as e:
            logger.error(f"Request failed for {url}: {e}")
            raise AcquisitionError(f"Request to {path} failed: {e}") from e

        if response.status_code == 401:
            logger.warning(f"Credential rejected for {path}")
            raise AuthExpiredError(f"401 Unauthorized for {path}")

        if not response.is_success:
            message = self._error_message(response)
            logger.error(f"HTTP error {response.status_code} for {url}: {message}")
            raise AcquisitionError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response from {path} is not valid JSON") from e

        if not isinstance(data, dict):
            raise MalformedResponseError(f"Response from {path} is not a JSON object")
        return data

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Prefer the server's 'message' field, fall back to the status line."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP error! status: {response.status_code}"

    async def list_profiles(self, page: int, limit: int,
                            filters: Dict[str, str]) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, **filters}
        return await self._get("/profiles", params=params)

    async def ai_search(self, query: str, page: int, limit: int) -> Dict[str, Any]:
        params = {"q": query, "page": page, "limit": limit}
        return await self._get("/profiles/ai-search", params=params)

    async def get_profile(self, profile_id: str) -> Dict[str, Any]:
        return await self._get(f"/profiles/{profile_id}")
