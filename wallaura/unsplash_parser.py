"""
Unsplash response parser.
Converts upstream photo records to the client-facing models.
"""

from typing import Any, Dict, List, Optional

from .models import UNTITLED, NormalizedPhoto, PhotoResults
from .router import Operation, UpstreamRequest


def _first(*values: Any) -> Optional[str]:
    """Return the first truthy value as a string, or None."""
    for value in values:
        if value:
            return value if isinstance(value, str) else str(value)
    return None


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    return section if isinstance(section, dict) else {}


def parse_photo(data: Dict[str, Any]) -> NormalizedPhoto:
    """
    Parse a single photo record.

    Every output field falls back through alternative source fields, so a
    missing upstream field only yields an empty output when all of its
    fallbacks are empty too.

    Args:
        data: Photo object from the Unsplash API

    Returns:
        NormalizedPhoto model
    """
    urls = _section(data, "urls")
    user = _section(data, "user")
    links = _section(data, "links")

    photo_id = data.get("id")

    return NormalizedPhoto(
        id=str(photo_id) if photo_id is not None else None,
        title=_first(data.get("description"), data.get("alt_description"), UNTITLED),
        src=_first(urls.get("regular"), urls.get("full"), urls.get("small")),
        author=_first(user.get("name"), user.get("username")),
        download=_first(links.get("download"), urls.get("full")),
    )


def parse_photos(records: List[Dict[str, Any]]) -> PhotoResults:
    """Parse photo records, keeping upstream order."""
    return PhotoResults(results=[parse_photo(p) for p in records if isinstance(p, dict)])


def parse_search_results(data: Any) -> PhotoResults:
    """Parse a search page: ``{"total": ..., "results": [...]}``."""
    results = data.get("results") if isinstance(data, dict) else None
    return parse_photos(results if isinstance(results, list) else [])


def parse_photo_list(data: Any) -> PhotoResults:
    """Parse a plain listing, which is a bare array of photo records."""
    return parse_photos(data if isinstance(data, list) else [])


def parse_download(data: Any, endpoint: str) -> Dict[str, Any]:
    """
    Pass a download-resolution body through.

    The body is returned unchanged, except that a missing or empty ``url``
    falls back to the endpoint that was requested.

    Args:
        data: Response body of the download endpoint
        endpoint: Download endpoint the body was fetched from

    Returns:
        Download body with a followable ``url``
    """
    body = dict(data) if isinstance(data, dict) else {}
    if not body.get("url"):
        body["url"] = endpoint
    return body


def normalize(request: UpstreamRequest, data: Any) -> Dict[str, Any]:
    """
    Map an upstream body to the JSON payload for the given operation.

    Returns:
        JSON-ready dict, safe to cache and replay
    """
    if request.operation == Operation.SEARCH:
        return parse_search_results(data).model_dump()
    if request.operation == Operation.LIST:
        return parse_photo_list(data).model_dump()
    return parse_download(data, request.url)
