"""
Unsplash REST API client.
"""

import time
from typing import Any, Dict, Optional

import httpx
from loguru import logger


class UnsplashAPIError(Exception):
    """
    Unsplash API error.

    ``status_code`` is None when the API could not be reached or its body
    could not be decoded.
    """
    def __init__(self, message: str, status_code: Optional[int], detail: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class UnsplashClient:
    """
    Unsplash API client.

    Authenticates every request with the application access key. Performs a
    single attempt per call; retrying is left to the caller.
    """

    def __init__(
        self,
        access_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Unsplash client.

        Args:
            access_key: Unsplash application access key
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used to stub the network in tests
        """
        self.access_key = access_key
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Client-ID {self.access_key}",
            "Accept-Version": "v1",
            "accept": "application/json",
        }

    async def fetch(self, url: str) -> Any:
        """
        GET an Unsplash endpoint and decode its JSON body.

        Args:
            url: Absolute endpoint URL, query string included

        Returns:
            Parsed JSON response

        Raises:
            UnsplashAPIError: On non-success status, transport failure or malformed body
        """
        started = time.monotonic()
        try:
            response = await self.client.get(url, headers=self._get_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UnsplashAPIError(f"Request error: {str(e)}", None) from e

        latency_ms = (time.monotonic() - started) * 1000
        logger.info(f"GET {url} -> {response.status_code} in {latency_ms:.0f}ms")

        if not response.is_success:
            raise UnsplashAPIError(
                f"Unsplash API returned {response.status_code}",
                status_code=response.status_code,
                detail=_safe_text(response),
            )

        try:
            return response.json()
        except ValueError as e:
            raise UnsplashAPIError(f"Malformed response body: {str(e)}", None) from e


def _safe_text(response: httpx.Response) -> str:
    """Best-effort body text of an error response."""
    try:
        return response.text
    except (UnicodeDecodeError, LookupError, httpx.HTTPError):
        return ""
