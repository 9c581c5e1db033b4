"""
Base API Client - Common HTTP request pattern for the three source clients.

Provides a reusable base class with:
- httpx.AsyncClient management (one client per source instance)
- Per-request timeout
- Optional bounded retry on transport errors, 429 and 5xx (default: none)
- Classification of failures into SourceUnavailableError / ParseError

Subclasses set `_service_name` and can override:
- `_handle_expected_status()`: service-specific status codes (e.g., 404)
- `_parse_response()`: custom body decoding

The public fetch methods of each subclass catch SourceError and degrade to
an absent/empty value; _make_request itself always raises on failure.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from typing_extensions import Self

from deep_search.core.exceptions import ParseError, SourceUnavailableError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class BaseAPIClient:
    """
    Base class for external API clients.

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            async def get_item(self, item_id: str) -> dict | None:
                return await self._make_request(f"https://api.example.com/items/{item_id}")
    """

    _service_name: str = "API"

    def __init__(
        self,
        timeout: float = 8.0,
        max_retries: int = 0,
        headers: dict[str, str] | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        """
        Initialize base client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Extra attempts after the first one (0 = single attempt)
            headers: Default headers for all requests
            retry_delay: Base delay for exponential backoff between attempts
        """
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._retry_delay = retry_delay
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            follow_redirects=True,
        )

    async def _make_request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        expect_json: bool = True,
    ) -> Any:
        """
        Make a GET request.

        Args:
            url: Full URL
            params: Query parameters
            expect_json: If True, parse response as JSON; otherwise return text

        Returns:
            Parsed body, or whatever _handle_expected_status short-circuits with

        Raises:
            SourceUnavailableError: transport failure or non-success status
            ParseError: body could not be decoded
        """
        last_error: SourceUnavailableError | None = None

        for attempt in range(self._max_retries + 1):
            if attempt:
                delay = self._retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"{self._service_name}: retry {attempt}/{self._max_retries} in {delay:.1f}s ({last_error})"
                )
                await asyncio.sleep(delay)

            try:
                response = await self._execute_request(url, params=params)
            except httpx.TimeoutException as e:
                last_error = SourceUnavailableError(f"timed out after {self._timeout:.1f}s", source=self._service_name)
                last_error.__cause__ = e
                continue
            except httpx.RequestError as e:
                last_error = SourceUnavailableError(f"request failed: {e}", source=self._service_name)
                last_error.__cause__ = e
                continue

            expected = self._handle_expected_status(response, url)
            if expected is not _CONTINUE:
                return expected

            if response.status_code in _RETRYABLE_STATUS:
                last_error = SourceUnavailableError(
                    f"HTTP {response.status_code}",
                    source=self._service_name,
                    status_code=response.status_code,
                )
                continue

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise SourceUnavailableError(
                    f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                    source=self._service_name,
                    status_code=e.response.status_code,
                ) from e

            return self._parse_response(response, expect_json)

        raise last_error or SourceUnavailableError(source=self._service_name)

    async def _execute_request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request. Override for custom behavior."""
        return await self._client.get(url, params=params)

    def _handle_expected_status(self, response: httpx.Response, url: str) -> Any:
        """
        Handle expected non-200 status codes that shouldn't be treated as failures.

        Return a value to short-circuit (e.g., None for 404).
        Return the sentinel _CONTINUE to continue normal processing.
        """
        return _CONTINUE

    def _parse_response(self, response: httpx.Response, expect_json: bool) -> Any:
        """Parse response body. Override for custom extraction logic."""
        if not expect_json:
            return response.text
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"invalid JSON body ({e})", source=self._service_name) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


# Sentinel object to indicate "continue normal processing" from _handle_expected_status
_CONTINUE = object()
