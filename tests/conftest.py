"""Pytest configuration and shared fixtures for the proxy tests."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from metproxy.collection.fetcher import ArtworkFetcher
from metproxy.collection.met_service import MetCollectionClient, create_http_client
from metproxy.config import Settings
from metproxy.main import create_app


BASE_URL = "https://met.test/public/collection/v1"


def make_artwork(object_id: int, image: Optional[str] = "auto", tags: Any = None) -> Dict[str, Any]:
    """Build a Met-like object record."""
    if image == "auto":
        image = f"https://images.met.test/{object_id}.jpg"
    return {
        "objectID": object_id,
        "title": f"Artwork {object_id}",
        "primaryImage": image,
        "tags": tags,
    }


class FakeMet:
    """In-memory stand-in for the Met collection API behind httpx.MockTransport."""

    def __init__(self, object_ids: Optional[Iterable[int]] = None):
        self.search_body: Any = {"total": 0, "objectIDs": None}
        self.objects: Dict[int, Dict[str, Any]] = {}
        self.errors: Dict[int, int] = {}
        self.departments: Any = {"departments": [{"departmentId": 1, "displayName": "American Decorative Arts"}]}
        self.departments_status = 200
        self.search_status = 200
        self.redirects: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []
        if object_ids is not None:
            self.set_candidates(object_ids)

    def set_candidates(self, object_ids: Iterable[int], records: bool = True) -> None:
        ids = list(object_ids)
        self.search_body = {"total": len(ids), "objectIDs": ids}
        if records:
            for object_id in ids:
                self.objects.setdefault(object_id, make_artwork(object_id))

    @property
    def object_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if "/objects/" in r.url.path]

    @property
    def requested_object_ids(self) -> List[int]:
        return sorted(int(r.url.path.rsplit("/", 1)[-1]) for r in self.object_requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.redirects:
            return httpx.Response(301, headers={"Location": self.redirects[path]})
        path = path.rstrip("/")
        if path.endswith("/departments"):
            return httpx.Response(self.departments_status, json=self.departments)
        if path.endswith("/search"):
            return httpx.Response(self.search_status, json=self.search_body)
        if "/objects/" in path:
            object_id = int(path.rsplit("/", 1)[-1])
            if object_id in self.errors:
                return httpx.Response(self.errors[object_id], json={"message": "error"})
            if object_id not in self.objects:
                return httpx.Response(404, json={"message": "ObjectID not found"})
            return httpx.Response(200, json=self.objects[object_id])
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def fake_met() -> FakeMet:
    return FakeMet()


@pytest.fixture
def settings() -> Settings:
    return Settings(met_api_base_url=BASE_URL, _env_file=None)


@pytest_asyncio.fixture
async def http_client(fake_met: FakeMet, settings: Settings):
    client = create_http_client(settings, transport=httpx.MockTransport(fake_met.handler))
    yield client
    await client.aclose()


@pytest.fixture
def met_client(http_client: httpx.AsyncClient) -> MetCollectionClient:
    return MetCollectionClient(http_client, BASE_URL)


@pytest.fixture
def fetcher(met_client: MetCollectionClient) -> ArtworkFetcher:
    return ArtworkFetcher(met_client, excluded_ids=frozenset({999}), batch_size=20)


@pytest.fixture
def api(fake_met: FakeMet, settings: Settings):
    """TestClient for an app whose upstream calls are served by ``fake_met``."""
    upstream = create_http_client(settings, transport=httpx.MockTransport(fake_met.handler))
    app = create_app(settings, http_client=upstream)
    with TestClient(app) as client:
        yield client
    asyncio.run(upstream.aclose())
