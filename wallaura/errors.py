"""
Errors surfaced to gallery clients as `{error, detail?}` JSON bodies.
"""

from typing import Dict, Optional

from .models import ErrorBody


class GalleryError(Exception):
    """Base error carrying the HTTP status and body to respond with."""
    status_code: int = 500

    def __init__(self, error: str, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> ErrorBody:
        return ErrorBody(error=self.error, detail=self.detail)

    def headers(self) -> Dict[str, str]:
        return {}


class MethodNotAllowedError(GalleryError):
    """Non-GET request to a GET-only endpoint."""
    status_code = 405

    def __init__(self, method: str):
        super().__init__("Method not allowed", f"{method} is not supported")

    def headers(self) -> Dict[str, str]:
        return {"Allow": "GET"}


class ConfigurationError(GalleryError):
    """No upstream credential is configured for this process."""
    status_code = 500

    def __init__(self):
        super().__init__(
            "NO_UNSPLASH_KEY",
            "Missing server-side UNSPLASH_KEY or VITE_UNSPLASH_ACCESS_KEY",
        )


class RateLimitError(GalleryError):
    """Client exceeded its request budget for the current window."""
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__("Rate limit exceeded", f"Retry after {retry_after} seconds")
        self.retry_after = retry_after

    def headers(self) -> Dict[str, str]:
        return {"Retry-After": str(self.retry_after)}


class UpstreamError(GalleryError):
    """Upstream API answered with a non-success status, mirrored to the client."""

    def __init__(self, error: str, status_code: int, detail: str = ""):
        super().__init__(error, detail, status_code=status_code)


class TransportError(GalleryError):
    """Upstream unreachable or returned an unreadable body."""
    status_code = 500

    def __init__(self):
        super().__init__("proxy error")
