"""Shared fakes and fixtures for the posts service tests."""

import copy
import math
import os

import pytest
from fastapi.testclient import TestClient

from .config import Settings
from .lib.blobstore import BlobStore
from .lib.errors import BlobStoreError
from .main import app

# Mean earth radius Elasticsearch uses for arc distances.
EARTH_RADIUS_KM = 6371.0088

API_KEY = "testkey"
HEADERS = {"X-API-Key": API_KEY, "X-Caller-Identity": "alice"}


def arc_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


class FakeIndices:
    def __init__(self, es: "FakeEs"):
        self._es = es
        self.created: dict[str, dict] = {}

    async def exists(self, *, index=None, **kwargs):
        return index in self._es.docs

    async def create(self, *, index=None, mappings=None, **kwargs):
        self.created[index] = mappings
        self._es.docs.setdefault(index, {})
        return {"acknowledged": True, "index": index}


class FakeEs:
    """In-memory Elasticsearch stand-in that evaluates ``geo_distance`` filters."""

    def __init__(self):
        self.docs: dict[str, dict[str, dict]] = {}
        self.calls: list[dict] = []
        self.indices = FakeIndices(self)
        self.fail_index = False
        self.fail_search = False
        self.reachable = True

    async def ping(self):
        return self.reachable

    async def index(self, *, index=None, id=None, document=None, refresh=None, **kwargs):
        self.calls.append({"op": "index", "index": index, "id": id, "refresh": refresh})
        if self.fail_index:
            raise ConnectionError("index write failed")
        self.docs.setdefault(index, {})[id] = copy.deepcopy(document)
        return {"_index": index, "_id": id, "result": "created"}

    async def search(self, *, index=None, query=None, size=None, **kwargs):
        self.calls.append({"op": "search", "index": index, "query": query, "size": size})
        if self.fail_search:
            raise ConnectionError("search failed")
        hits = [
            {"_index": index, "_id": doc_id, "_score": 0.0, "_source": copy.deepcopy(doc)}
            for doc_id, doc in self.docs.get(index, {}).items()
            if self._matches(doc, query)
        ]
        if size is not None:
            hits = hits[:size]
        return {"took": 1, "hits": {"total": {"value": len(hits)}, "hits": hits}}

    def _matches(self, doc: dict, query: dict | None) -> bool:
        if not query:
            return True
        for clause in query.get("bool", {}).get("filter", []):
            geo = clause.get("geo_distance")
            if geo is None:
                continue
            location = doc.get("location")
            if not location:
                return False
            center = geo["location"]
            radius = float(geo["distance"].removesuffix("km"))
            d = arc_distance_km(center["lat"], center["lon"], location["lat"], location["lon"])
            if d > radius:
                return False
        return True


class FakeBlobStore(BlobStore):
    """Records uploads in memory; can be made to fail or to block."""

    BASE_URL = "https://blobs.test/post-images"

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str | None] = {}
        self.rolled: dict[str, bool | None] = {}
        self.fail = False
        self.gate = None

    async def put(self, key, stream, content_type=None):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise BlobStoreError()
        self.rolled[key] = getattr(stream, "_rolled", None)
        self.objects[key] = stream.read()
        self.content_types[key] = content_type
        return f"{self.BASE_URL}/{key}"


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def fake_es():
    return FakeEs()


@pytest.fixture
def fake_blob_store():
    return FakeBlobStore()


@pytest.fixture
def api_client(settings, fake_es, fake_blob_store):
    """A TestClient wired to the fakes, with a predictable API key."""
    prev = os.environ.get("API_KEY")
    os.environ["API_KEY"] = API_KEY

    app.state.settings = settings
    app.state.es = fake_es
    app.state.blob_store = fake_blob_store
    yield TestClient(app, headers=HEADERS)

    for attr in ("settings", "es", "blob_store"):
        try:
            delattr(app.state, attr)
        except (AttributeError, KeyError):
            pass
    if prev is None:
        del os.environ["API_KEY"]
    else:
        os.environ["API_KEY"] = prev
