"""
Gallery proxy service: rate limiting, response caching and upstream dispatch.
"""

import time
from typing import Any, Callable, Dict, Mapping, Optional

import httpx
from loguru import logger

from .errors import (
    ConfigurationError,
    MethodNotAllowedError,
    RateLimitError,
    TransportError,
    UpstreamError,
)
from .memory_cache import ResponseCache
from .rate_limiter import RateLimiter
from .router import route
from .settings import Settings
from .unsplash_client import UnsplashAPIError, UnsplashClient
from .unsplash_parser import normalize


class GalleryProxy:
    """
    Long-lived proxy state, created once at process start.

    Owns the per-client rate-limit table and the response cache. Both are
    plain in-process mappings; each request's look-up/mutate/decide sequence
    runs without an await in between, so no locking is needed on a single
    event loop.
    """

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], float] = time.time,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the proxy.

        Args:
            settings: Proxy settings
            clock: Time source returning seconds, shared by limiter and cache
            transport: Optional httpx transport for upstream calls
        """
        self.settings = settings
        self.transport = transport
        self._clock = clock
        self.limiter = RateLimiter(
            max_requests=settings.rate_limit_max,
            window=settings.rate_limit_window,
            max_clients=settings.rate_limit_max_clients,
            clock=clock,
        )
        self.cache = ResponseCache(
            ttl=settings.cache_ttl,
            max_entries=settings.cache_max_entries,
            clock=clock,
        )

    def _new_client(self) -> UnsplashClient:
        return UnsplashClient(
            access_key=self.settings.access_key,
            timeout=self.settings.upstream_timeout,
            transport=self.transport,
        )

    async def handle(self, method: str, params: Mapping[str, str], client_key: str) -> Dict[str, Any]:
        """
        Serve one gallery request.

        Args:
            method: HTTP method of the incoming request
            params: Query parameters
            client_key: Caller identity for rate limiting

        Returns:
            JSON payload: ``{"results": [...]}`` or a download-resolution body

        Raises:
            MethodNotAllowedError: For anything but GET, before any state is touched
            RateLimitError: When the client is over its budget
            ConfigurationError: When no credential is configured
            UpstreamError: When Unsplash answers with a non-success status
            TransportError: When Unsplash is unreachable or its body is unreadable
        """
        if method != "GET":
            raise MethodNotAllowedError(method)

        decision = self.limiter.admit(client_key, self._clock())
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {client_key}, retry in {decision.retry_after}s")
            raise RateLimitError(decision.retry_after)

        if not self.settings.access_key:
            raise ConfigurationError()

        request = route(params, self.settings.api_base)

        cached = self.cache.get(request.cache_key)
        if cached is not None:
            logger.debug(f"Cache hit: {request.cache_key}")
            return cached
        logger.debug(f"Cache miss: {request.cache_key}")

        client = self._new_client()
        try:
            data = await client.fetch(request.url)
        except UnsplashAPIError as e:
            if e.status_code is None:
                logger.exception(f"Upstream {request.operation.value} call failed: {e}")
                raise TransportError() from e
            raise UpstreamError(request.operation.error_label, e.status_code, e.detail) from e
        finally:
            await client.close()

        payload = normalize(request, data)
        self.cache.set(request.cache_key, payload)
        return payload
