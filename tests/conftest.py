"""
Shared fixtures.

Every test gets its own SQLite file under pytest's tmp_path, so stores never
leak between tests.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shortlinks.core.rate_limit import limiter
from shortlinks.core.setting import settings
from shortlinks.db.session import create_engine, create_session_maker, create_tables
from shortlinks.services import url_service
from shortlinks.services.link_store import LinkStore

# Multiple of 1000 so the float round trip through time.time() is exact
FROZEN_NOW_MS = 1_700_000_000_000


class FrozenTime:
    """Stand-in for the ``time`` module with a settable clock."""

    def __init__(self, now_ms: int = FROZEN_NOW_MS):
        self.now_ms = now_ms

    def time(self) -> float:
        return self.now_ms / 1000

    def advance(self, milliseconds: int) -> None:
        self.now_ms += milliseconds


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'shortlinks.db'}"


@pytest_asyncio.fixture
async def store(database_url):
    """A LinkStore over an empty temporary database."""
    engine = create_engine(database_url)
    await create_tables(engine)
    yield LinkStore(create_session_maker(engine), storage_key="test-links")
    await engine.dispose()


@pytest.fixture
def frozen_time(monkeypatch) -> FrozenTime:
    """Freeze current_time_ms() for both allocation and resolution."""
    frozen = FrozenTime()
    monkeypatch.setattr(url_service, "time", frozen)
    return frozen


@pytest.fixture
def client(monkeypatch, database_url):
    """TestClient with startup/shutdown run against a temporary database."""
    from shortlinks.main import app

    monkeypatch.setattr(settings, "DATABASE_URL", database_url)
    monkeypatch.setattr(settings, "BASE_URL", "http://sho.rt")
    monkeypatch.setattr(limiter, "enabled", False)
    limiter.reset()

    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
