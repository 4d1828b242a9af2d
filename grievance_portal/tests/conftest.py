"""
Shared pytest fixtures for the Community Grievance Portal test suite.

Provides an httpx AsyncClient wired to an in-memory record store, so the
suite runs without MongoDB.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
import httpx

from grievance_portal.portal import app, get_store, limiter
from grievance_portal.store import StoreReadError, StoreWriteError


class MemoryStore:
    """In-memory stand-in for GrievanceStore with the same insert/select contract."""

    def __init__(self):
        self.tables = {}
        self.insert_calls = []
        self.select_calls = []
        self._seq = 0

    def insert(self, table, rows):
        self.insert_calls.append((table, list(rows)))
        inserted = []
        for row in rows:
            self._seq += 1
            ts = datetime.now(timezone.utc) + timedelta(microseconds=self._seq)
            doc = {"id": f"test-{self._seq:04d}", **row}
            doc.setdefault("created_at", ts)
            doc.setdefault("updated_at", ts)
            self.tables.setdefault(table, []).append(doc)
            inserted.append(dict(doc))
        return inserted

    def select(self, table, order_by="created_at", ascending=False):
        self.select_calls.append((table, order_by, ascending))
        rows = sorted(self.tables.get(table, []), key=lambda r: r[order_by], reverse=not ascending)
        return [dict(r) for r in rows]


class FailingStore(MemoryStore):
    def insert(self, table, rows):
        self.insert_calls.append((table, list(rows)))
        raise StoreWriteError("connection refused")

    def select(self, table, order_by="created_at", ascending=False):
        self.select_calls.append((table, order_by, ascending))
        raise StoreReadError("connection refused")


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()


async def _client_for(store):
    # Disable rate limiting during tests so repeated submissions aren't throttled
    limiter.enabled = False
    app.dependency_overrides[get_store] = lambda: store
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


@pytest_asyncio.fixture
async def client(memory_store):
    """In-process httpx AsyncClient backed by ``memory_store``."""
    async with await _client_for(memory_store) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def failing_client(failing_store):
    async with await _client_for(failing_store) as c:
        yield c
    app.dependency_overrides.clear()
