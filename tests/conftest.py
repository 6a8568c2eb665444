# Shared fixtures: a Paket server over a throwaway SQLite file.

import pytest
from fastapi.testclient import TestClient

from paket.config import Settings
from paket.main import create_app
from paket.store import ArticleStore


@pytest.fixture
def settings(tmp_path):
    return Settings(
        name="Test Paket",
        desc="Links for tests",
        link="https://paket.example/feed.xml",
        db=str(tmp_path / "paket.db"),
        ttl=60,
        fetch_titles=False,
    )


@pytest.fixture
def store(settings):
    store = ArticleStore.open(settings.db, ttl_days=settings.ttl)
    yield store
    store.close()


@pytest.fixture
def titles():
    """Stand-in for page title lookup; maps url -> title."""
    return {}


@pytest.fixture
def app(settings, store, titles):
    return create_app(settings, store=store, title_fetcher=lambda url: titles.get(url, f"Title of {url}"))


@pytest.fixture
def client(app):
    return TestClient(app)
