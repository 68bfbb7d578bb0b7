import pytest
from fastapi.testclient import TestClient

from catalog.cache import CatalogCache
from catalog.main import app, get_catalog_cache
from catalog.models import CacheStatus, CanonicalRecord
from catalog.sources import Tier

client = TestClient(app)

RECORDS = [
    CanonicalRecord(
        name="Steam Deck OLED",
        brand="Valve",
        release_year="2023",
        performance_score="High",
        image_url="/handheld-images/device_1.png",
        additional_data={"OS": "SteamOS", "Screen": "7.4in"},
    ),
    CanonicalRecord(name="ROG Ally", brand="ASUS", additional_data={"Battery": "40Wh"}),
]


@pytest.fixture
def cache(clock):
    state = {"fail": False}

    def load():
        if state["fail"]:
            raise RuntimeError("sources down")
        return RECORDS

    cache = CatalogCache([Tier("stub", CacheStatus.MISS, load)], clock=clock)
    cache.state = state
    app.dependency_overrides[get_catalog_cache] = lambda: cache
    yield cache
    app.dependency_overrides.clear()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_list_handhelds_miss_then_hit(cache):
    r = client.get("/api/handhelds")
    assert r.status_code == 200
    assert r.headers["X-Cache"] == "MISS"
    assert r.headers["Cache-Control"] == "public, max-age=3600"
    assert "X-Total-Count" not in r.headers

    data = r.json()
    assert data[0] == {
        "name": "Steam Deck OLED",
        "brand": "Valve",
        "price": "TBA",
        "releaseYear": "2023",
        "performanceScore": "High",
        "imageURL": "/handheld-images/device_1.png",
        "additionalData": {"OS": "SteamOS", "Screen": "7.4in"},
    }

    assert client.get("/api/handhelds").headers["X-Cache"] == "HIT"


def test_list_handhelds_limit_headers(cache):
    r = client.get("/api/handhelds", params={"limit": 1})
    assert r.status_code == 200
    assert len(r.json()) == 1
    assert r.headers["X-Total-Count"] == "2"
    assert r.headers["X-Returned-Count"] == "1"


def test_list_handhelds_rejects_zero_limit(cache):
    r = client.get("/api/handhelds", params={"limit": 0})
    assert r.status_code == 422


def test_refresh_serves_stale_when_sources_fail(cache):
    client.get("/api/handhelds")
    cache.state["fail"] = True

    r = client.get("/api/handhelds", params={"refresh": "true"})
    assert r.status_code == 200
    assert r.headers["X-Cache"] == "STALE"
    assert [d["name"] for d in r.json()] == ["Steam Deck OLED", "ROG Ally"]


def test_fallback_when_nothing_is_available(cache):
    cache.state["fail"] = True

    r = client.get("/api/handhelds")
    assert r.status_code == 200
    assert r.headers["X-Cache"] == "FALLBACK"
    assert len(r.json()) == 8
    assert r.json()[0]["price"] == "$549-$649"


def test_additional_columns(cache):
    r = client.get("/api/handhelds/columns")
    assert r.status_code == 200
    assert r.json() == {"columns": ["OS", "Screen", "Battery"]}


def test_missing_image_is_not_found():
    r = client.get("/handheld-images/device_999.png")
    assert r.status_code == 404
