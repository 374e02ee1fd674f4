"""
Classify gallery requests and derive upstream URLs and cache keys.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping
from urllib.parse import quote, urlencode

DEFAULT_PER_PAGE = "20"
DEFAULT_PAGE = "1"


class Operation(str, Enum):
    """Upstream operation kinds, valued by their cache key tag."""
    SEARCH = "search"
    DOWNLOAD = "download"
    LIST = "list"

    @property
    def error_label(self) -> str:
        return _ERROR_LABELS[self]


_ERROR_LABELS = {
    Operation.SEARCH: "Unsplash search error",
    Operation.DOWNLOAD: "Unsplash download endpoint error",
    Operation.LIST: "Unsplash list error",
}


@dataclass(frozen=True)
class UpstreamRequest:
    operation: Operation
    url: str
    cache_key: str


def route(params: Mapping[str, str], api_base: str) -> UpstreamRequest:
    """
    Pick the upstream operation for a set of query parameters.

    - ``q`` present (even empty): photo search
    - ``download_location`` or ``download_id`` non-empty: download resolution,
      an explicit location taking precedence over the id
    - otherwise: plain photo listing

    Args:
        params: Query parameters of the incoming request
        api_base: Upstream base URL without trailing slash

    Returns:
        UpstreamRequest with the URL to fetch and its cache key
    """
    per_page = params.get("per_page") or DEFAULT_PER_PAGE

    if "q" in params:
        query = [
            ("query", params["q"]),
            ("per_page", per_page),
            ("page", params.get("page") or DEFAULT_PAGE),
        ]
        # urlencode escapes separators, so distinct parameters never collide
        encoded = urlencode(query)
        return UpstreamRequest(
            operation=Operation.SEARCH,
            url=f"{api_base}/search/photos?{encoded}",
            cache_key=f"{Operation.SEARCH.value}:{encoded}",
        )

    download_location = params.get("download_location")
    download_id = params.get("download_id")
    if download_location or download_id:
        if download_location:
            endpoint = download_location
        else:
            endpoint = f"{api_base}/photos/{quote(download_id, safe='')}/download"
        return UpstreamRequest(
            operation=Operation.DOWNLOAD,
            url=endpoint,
            cache_key=f"{Operation.DOWNLOAD.value}:{endpoint}",
        )

    encoded = urlencode([("per_page", per_page)])
    return UpstreamRequest(
        operation=Operation.LIST,
        url=f"{api_base}/photos?{encoded}",
        cache_key=f"{Operation.LIST.value}:{encoded}",
    )
