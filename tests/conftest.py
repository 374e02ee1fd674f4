"""
Shared pytest fixtures: fake clock, stubbed Unsplash API, wired test client.
"""

import json
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app import app, get_gallery
from wallaura.gallery import GalleryProxy
from wallaura.settings import Settings

API_BASE = "https://api.unsplash.test"


class FakeClock:
    """Manually advanced time source, in seconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_photo(photo_id: str, **overrides) -> Dict:
    photo = {
        "id": photo_id,
        "description": f"Photo {photo_id}",
        "alt_description": f"alt {photo_id}",
        "urls": {
            "raw": f"https://images.test/{photo_id}?raw",
            "full": f"https://images.test/{photo_id}?full",
            "regular": f"https://images.test/{photo_id}?regular",
            "small": f"https://images.test/{photo_id}?small",
        },
        "links": {
            "download": f"https://unsplash.test/photos/{photo_id}/download",
            "download_location": f"{API_BASE}/photos/{photo_id}/download?ixid=abc",
        },
        "user": {"name": f"Author {photo_id}", "username": f"user_{photo_id}"},
    }
    photo.update(overrides)
    return photo


class FakeUnsplash:
    """
    Stand-in for the Unsplash API behind an httpx.MockTransport.

    Records every request it receives. ``responses`` maps a URL path to an
    httpx.Response factory, overriding the default routes.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responses: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.responses:
            return self.responses[path](request)

        if path == "/search/photos":
            term = request.url.params.get("query", "")
            page = request.url.params.get("page", "1")
            return httpx.Response(200, json={
                "total": 2,
                "total_pages": 1,
                "results": [make_photo(f"{term}-{page}-a"), make_photo(f"{term}-{page}-b")],
            })
        if path == "/photos":
            return httpx.Response(200, json=[make_photo("list-a"), make_photo("list-b")])
        if path.endswith("/download"):
            return httpx.Response(200, json={"url": f"https://images.test{path}?signed=1"})

        return httpx.Response(404, text=json.dumps({"errors": ["Not found"]}))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUnsplash:
    return FakeUnsplash()


@pytest.fixture
def settings() -> Settings:
    return Settings(access_key="test-access-key-1234", api_base=API_BASE)


@pytest.fixture
def gallery(settings, clock, upstream) -> GalleryProxy:
    return GalleryProxy(settings, clock=clock, transport=upstream.transport())


def make_client(gallery: Optional[GalleryProxy]) -> TestClient:
    app.dependency_overrides[get_gallery] = lambda: gallery
    return TestClient(app)


@pytest.fixture
def client(gallery):
    yield make_client(gallery)
    app.dependency_overrides.clear()
