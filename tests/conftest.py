import pytest
from fastapi.testclient import TestClient

from portfolio.main import create_app
from portfolio.pages.regeneration import RegenerationCache
from portfolio.shared import config
from portfolio.shared.database import DocumentStore
from portfolio.stats.cache import MemoryCacheStore, StatsCache

ADMIN_USERNAME = "owner"
ADMIN_PASSWORD = "correct-horse"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Stands in for a stats provider call."""

    def __init__(self, provider: str):
        self.provider = provider
        self.calls = []
        self.error = None

    def __call__(self, username: str) -> dict:
        self.calls.append(username)
        if self.error is not None:
            raise self.error
        return {"provider": self.provider, "username": username, "call": len(self.calls)}


@pytest.fixture(autouse=True)
def test_config(monkeypatch):
    monkeypatch.setattr(config, "ENVIRONMENT", "development")
    monkeypatch.setattr(config, "ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setattr(config, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(config, "SESSION_SECRET", "test-session-secret")
    monkeypatch.setattr(config, "SESSION_MAX_AGE", 3600)
    monkeypatch.setattr(config, "INTERNAL_API_KEY", None)
    monkeypatch.setattr(config, "PAGE_REVALIDATE_SECONDS", 60)
    monkeypatch.setattr(config, "SITE_URL", "https://example.dev")


@pytest.fixture
def store():
    store = DocumentStore("sqlite://")
    store.connect()
    yield store
    store.close()


@pytest.fixture
def unreachable_store(tmp_path):
    return DocumentStore(f"sqlite:///{tmp_path}/missing/dir/portfolio.db")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetchers():
    return {"github": FakeFetcher("github"), "leetcode": FakeFetcher("leetcode")}


@pytest.fixture
def stats_cache(fetchers, clock):
    return StatsCache(MemoryCacheStore(), fetchers, ttl=3600, clock=clock, single_flight=False)


@pytest.fixture
def page_cache(clock):
    cache = RegenerationCache(clock=clock)
    yield cache
    cache.shutdown()


@pytest.fixture
def app(store, stats_cache, page_cache):
    return create_app(store=store, stats_cache=stats_cache, page_cache=page_cache, prerender=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(app):
    client = TestClient(app)
    response = client.post(
        "/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client


def project_payload(**overrides) -> dict:
    payload = {
        "slug": "ledger-service",
        "title": "Ledger Service",
        "description": "Double-entry bookkeeping API",
        "tags": ["FastAPI", "PostgreSQL"],
    }
    payload.update(overrides)
    return payload


def article_payload(**overrides) -> dict:
    payload = {
        "slug": "scaling-reads",
        "title": "Scaling Reads",
        "date": "2024-03-01",
        "description": "Read replicas in practice",
        "tags": ["databases"],
        "content": "# Scaling reads\n\nStart with an index.",
    }
    payload.update(overrides)
    return payload
