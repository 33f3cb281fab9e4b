"""Service test fixtures — scripted DB session + FastAPI test client.

Invariants:
    - Every test gets a fresh FakeSession with an empty result queue
    - get_db dependency overridden to yield the FakeSession
    - Executed statements are recorded so tests can inspect SQL and bound values

Design Decisions:
    - Scripted session instead of a live PostgreSQL: the index query relies on
      json_agg, LATERAL joins and to_tsvector, so tests assert on the compiled
      statement and feed back rows shaped like the real driver's
"""

from collections import deque

import pytest
from httpx import ASGITransport, AsyncClient

from assetquery.config import Settings
from assetquery.infrastructure.database import get_db
from assetquery.main import app


class FakeResult:
    """Just enough of sqlalchemy's Result for the service."""

    def __init__(self, rows=None, mapping=None):
        self._rows = rows or []
        self._mapping = mapping

    def mappings(self):
        return self

    def one(self):
        return self._mapping

    def scalars(self):
        return FakeResult(rows=[row[0] for row in self._rows])

    def all(self):
        return list(self._rows)


class FakeSession:
    """Records executed statements and replays queued results in order."""

    def __init__(self):
        self.executed = []
        self.results = deque()
        self.error = None

    def queue_page(self, assets, total_count):
        self.results.append(FakeResult(mapping={
            "total_count": total_count, "assets": assets,
        }))

    def queue_rows(self, rows):
        self.results.append(FakeResult(rows=rows))

    async def execute(self, statement, params=None):
        self.executed.append((statement, params))
        if self.error:
            raise self.error
        return self.results.popleft()


@pytest.fixture
def fake_db():
    return FakeSession()


@pytest.fixture
def settings():
    return Settings(default_per_page=20, max_per_page=100)


@pytest.fixture
async def client(fake_db):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        yield fake_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
