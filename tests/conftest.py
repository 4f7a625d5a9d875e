from pathlib import Path

import pytest

from dashlink import create_app
from dashlink.config import DashlinkConfig
from dashlink.exceptions import FetchError, FetchErrorKind
from dashlink.models.snapshot import DashboardItem, DashboardSnapshot
from dashlink.storage.json_store import JsonDocumentStore
from dashlink.storage.link_store import LinkStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeFetcher:
    """Serves canned feed text by URL; unknown URLs fail with HTTP 404."""

    def __init__(self, feeds=None):
        self.feeds = dict(feeds or {})
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        result = self.feeds.get(url)
        if result is None:
            raise FetchError(
                "HTTP 404: Not Found",
                kind=FetchErrorKind.STATUS,
                url=url,
                status_code=404,
            )
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def sample_ics():
    """Feed with a travel match, a local match and an unmatched all-day event."""
    return (FIXTURES_DIR / "sample.ics").read_text()


@pytest.fixture
def config(tmp_path):
    """Config pointing at a temporary data directory."""
    return DashlinkConfig(data_dir=tmp_path / "data", log_dir=tmp_path / "logs")


@pytest.fixture
def documents(config):
    return JsonDocumentStore(config.data_dir)


@pytest.fixture
def store(config):
    return LinkStore.from_config(config)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def snapshot():
    """Dashboard records matching the sample feed."""
    return DashboardSnapshot(
        destinations=(DashboardItem(id="d1", name="Lisbon Trip"),),
        places=(DashboardItem(id="p1", name="Bar Volo"),),
        experiences=(
            DashboardItem(id="e1", name="Learn to surf in Portugal"),
        ),
    )


@pytest.fixture
def app(config, store, fetcher):
    """Create and configure a Flask app for testing."""
    app = create_app(config, store=store, fetcher=fetcher)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
