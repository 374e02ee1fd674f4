"""
Pass-through byte proxy for fetching images across origins.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Optional
from urllib.parse import unquote

import httpx

LONG_CACHE_CONTROL = "public, max-age=31536000"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ProxiedResponse:
    """Open upstream response. ``aclose`` must be awaited once the body is consumed."""
    status_code: int
    content_type: str
    response: httpx.Response
    client: httpx.AsyncClient

    @property
    def is_success(self) -> bool:
        return self.response.is_success

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        async for chunk in self.response.aiter_bytes():
            yield chunk

    async def read_text(self) -> str:
        await self.response.aread()
        return self.response.text

    async def aclose(self):
        await self.response.aclose()
        await self.client.aclose()


async def open_upstream(
    url: str,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProxiedResponse:
    """
    Start streaming an arbitrary URL.

    The URL is percent-decoded once more, since browsers often encode it
    before putting it in the query string.

    Args:
        url: Target URL from the ``url`` query parameter
        timeout: Request timeout in seconds
        transport: Optional httpx transport

    Returns:
        ProxiedResponse with the body not yet read

    Raises:
        httpx.HTTPError: When the target cannot be reached
    """
    client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)
    try:
        request = client.build_request("GET", unquote(url))
        response = await client.send(request, stream=True)
    except Exception:
        await client.aclose()
        raise

    return ProxiedResponse(
        status_code=response.status_code,
        content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
        response=response,
        client=client,
    )
