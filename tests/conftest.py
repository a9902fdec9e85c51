import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
import uuid

# Add the project root to sys.path so we can import booktracker without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from booktracker.api.app import app
from booktracker.auth.dependencies import get_supabase_client
from booktracker.auth.schemas import User


# =============================================================================
# In-memory stand-in for the Supabase query builder and auth client
# =============================================================================


class FakeQuery:
    """Records a PostgREST-style builder chain and applies it to in-memory rows."""

    def __init__(self, backend: "FakeSupabase", table: str):
        self.backend = backend
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters: list[tuple[str, object]] = []
        self.order_by: tuple[str, bool] | None = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def _matches(self, row) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self):
        if self.backend.fail_next:
            self.backend.fail_next = False
            raise RuntimeError("connection reset")

        rows = self.backend.tables.setdefault(self.table, [])

        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {
                    **payload,
                    "id": str(uuid.uuid4()),
                    "created_at": self.backend.next_timestamp(),
                }
                rows.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted, error=None)

        matching = [row for row in rows if self._matches(row)]

        if self.action == "update":
            for row in matching:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matching], error=None)

        if self.action == "delete":
            self.backend.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in matching], error=None)

        result = [dict(row) for row in matching]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda row: row[column], reverse=desc)
        return SimpleNamespace(data=result, error=None)


class FakeAuth:
    def __init__(self, tokens: dict[str, str]):
        self.tokens = tokens

    async def get_user(self, jwt: str):
        user_id = self.tokens.get(jwt)
        if user_id is None:
            return SimpleNamespace(user=None)
        return SimpleNamespace(user=SimpleNamespace(
            id=user_id,
            aud="authenticated",
            role="authenticated",
            email=f"{user_id}@example.com",
            email_confirmed_at=None,
            phone=None,
            confirmed_at=None,
            last_sign_in_at=None,
            app_metadata={"provider": "email"},
            user_metadata={},
            created_at="2024-01-01T00:00:00+00:00",
            updated_at="2024-01-01T00:00:00+00:00",
        ))


class FakeSupabase:
    """Just enough of AsyncClient for the books API: table() chains and auth.get_user()."""

    def __init__(self, tokens: dict[str, str]):
        self.tables: dict[str, list[dict]] = {}
        self.auth = FakeAuth(tokens)
        self.fail_next = False
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# =============================================================================
# Fixtures
# =============================================================================


ALICE_TOKEN = "alice-token"
BOB_TOKEN = "bob-token"


@pytest.fixture
def fake_supabase():
    return FakeSupabase({ALICE_TOKEN: "alice", BOB_TOKEN: "bob"})


@pytest.fixture
def api_client(fake_supabase):
    """TestClient whose Supabase client is the in-memory fake (real auth gate runs)."""
    app.dependency_overrides[get_supabase_client] = lambda: fake_supabase
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def alice_headers():
    return {"Authorization": f"Bearer {ALICE_TOKEN}"}


@pytest.fixture
def bob_headers():
    return {"Authorization": f"Bearer {BOB_TOKEN}"}


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase AsyncClient"""
    mock = AsyncMock()
    mock.auth = AsyncMock()
    mock.table = MagicMock(return_value=mock)
    mock.select = MagicMock(return_value=mock)
    mock.insert = MagicMock(return_value=mock)
    mock.update = MagicMock(return_value=mock)
    mock.delete = MagicMock(return_value=mock)
    mock.eq = MagicMock(return_value=mock)
    mock.order = MagicMock(return_value=mock)
    mock.execute = AsyncMock()
    return mock


@pytest.fixture
def mock_current_user():
    """Mock authenticated user"""
    return User(
        id="user-123",
        aud="authenticated",
        role="authenticated",
        email="test@example.com",
        app_metadata={"provider": "email"},
        created_at="2023-01-01T00:00:00Z",
        updated_at="2023-01-01T00:00:00Z",
    )
