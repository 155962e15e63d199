"""Shared fixtures for NaBajk tests.

Provides:
- fake_db: patches supabase_client with an in-memory fake
- client: sync TestClient with the admin gate overridden
- anon_client: TestClient with no admin session
- sample data factories for announcements, routes, group rides, races
"""

import os
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

import pytest
from postgrest.exceptions import APIError

# Set env vars before any NaBajk imports
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "fake-key")
os.environ.setdefault("SUPABASE_ANON_KEY", "fake-anon-key")

ADMIN = {"user_id": "admin-user-1", "email": "admin@nabajk.si"}


# ---------------------------------------------------------------------------
# In-memory fake Supabase
# ---------------------------------------------------------------------------

class FakeQueryResult:
    def __init__(self, data=None, count=None):
        self.data = data or []
        self.count = count


class FakeQueryBuilder:
    """Mimics the supabase-py query builder chain."""

    def __init__(self, db, table_name):
        self._db = db
        self._store = db.store
        self._table = table_name
        self._filters = []
        self._orders = []
        self._limit_val = None
        self._columns = "*"
        self._count_mode = None
        self._update_data = None
        self._delete_mode = False
        self._insert_data = None

    def select(self, columns="*", count=None):
        self._columns = columns
        self._count_mode = count
        return self

    def insert(self, data):
        self._insert_data = data
        return self

    def update(self, data):
        self._update_data = data
        return self

    def delete(self):
        self._delete_mode = True
        return self

    def eq(self, col, val):
        self._filters.append(("eq", col, val))
        return self

    def gte(self, col, val):
        self._filters.append(("gte", col, val))
        return self

    def order(self, col, desc=False):
        self._orders.append((col, desc))
        return self

    def limit(self, n):
        self._limit_val = n
        return self

    def _match(self, row):
        for op, col, val in self._filters:
            row_val = row.get(col)
            if op == "eq" and row_val != val:
                return False
            if op == "gte" and (row_val is None or str(row_val) < str(val)):
                return False
        return True

    def _check_insert(self, row):
        for col in self._db.unique.get(self._table, ()):
            if any(existing.get(col) == row.get(col) for existing in self._store[self._table]):
                raise APIError({
                    "message": f'duplicate key value violates unique constraint "{self._table}_{col}_key"',
                    "code": "23505",
                    "hint": None,
                    "details": None,
                })
        for predicate, error in self._db.rejections.get(self._table, []):
            if predicate(row):
                raise APIError(dict(error))

    def execute(self):
        table = self._store[self._table]

        if self._insert_data is not None:
            row = dict(self._insert_data)
            self._check_insert(row)
            if "id" not in row:
                row["id"] = str(uuid.uuid4())
            table.append(row)
            return FakeQueryResult(data=[row])

        if self._update_data is not None:
            updated = []
            for row in table:
                if self._match(row):
                    row.update(self._update_data)
                    updated.append(row)
            return FakeQueryResult(data=updated)

        if self._delete_mode:
            remaining = [r for r in table if not self._match(r)]
            removed = [r for r in table if self._match(r)]
            table.clear()
            table.extend(remaining)
            return FakeQueryResult(data=removed)

        # SELECT
        rows = [r for r in table if self._match(r)]

        # Stable sorts applied last-key-first give multi-column ordering
        for col, desc in reversed(self._orders):
            rows.sort(key=lambda r: r.get(col) or "", reverse=desc)

        total = len(rows)
        if self._limit_val is not None:
            rows = rows[:self._limit_val]

        return FakeQueryResult(
            data=rows,
            count=total if self._count_mode else None,
        )


class FakeDB:
    """In-memory store keyed by table name."""

    def __init__(self):
        self.store = defaultdict(list)
        self.unique = {"waitlist": ("email",)}
        self.rejections = defaultdict(list)

    def table(self, name):
        return FakeQueryBuilder(self, name)

    def reject(self, table, predicate, message="new row violates row-level security policy",
               code="42501"):
        """Make inserts into ``table`` fail for rows matching ``predicate``."""
        self.rejections[table].append(
            (predicate, {"message": message, "code": code, "hint": None, "details": None})
        )

    def clear(self):
        self.store.clear()


@pytest.fixture
def fake_db():
    """Provides a clean in-memory DB and patches supabase_client._table."""
    db = FakeDB()

    def fake_table(name):
        return FakeQueryBuilder(db, name)

    with patch("nabajk.supabase_client._table", side_effect=fake_table):
        with patch("nabajk.supabase_client.get_client", return_value=MagicMock()):
            yield db


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with empty rate-limit buckets."""
    from nabajk.routers import auth, landing, public_api

    for limiter in (auth.login_limiter, landing.waitlist_limiter, public_api.feed_limiter):
        limiter.clear()
    yield


@pytest.fixture
def anon_client(fake_db):
    """TestClient without an admin session."""
    from fastapi.testclient import TestClient
    from nabajk.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def client(fake_db):
    """TestClient signed in as an admin."""
    from fastapi.testclient import TestClient
    from nabajk.app import create_app
    from nabajk.routers.auth import require_admin

    app = create_app()
    app.dependency_overrides[require_admin] = lambda: dict(ADMIN)

    # Write-failure alerts resolve diagnostics from the session cookie
    with patch("nabajk.services.auth.auth_diagnostics", return_value={
        "has_session": True, "user_id": ADMIN["user_id"], "user_email": ADMIN["email"],
        "is_admin": True, "session_error": None, "admin_check_error": None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }):
        with TestClient(app) as c:
            yield c


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

def make_announcement(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "title": "Zaprta cesta na Vršič",
        "body": "Cesta je zaradi plazu zaprta do nadaljnjega.",
        "language": "sl",
        "active": True,
        "start_date": None,
        "end_date": None,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_route(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "title": "Krog okoli Bleda",
        "gpx_data": None,
        "distance_km": 42.5,
        "elevation_m": 610,
        "difficulty": "medium",
        "region": "gorenjska",
        "traffic": "Low",
        "road_condition": "Good asphalt",
        "why_good": "Lake views and a coffee stop",
        "published": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_group_ride(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "title": "Jutranja kava",
        "ride_date": "2099-05-10",
        "ride_time": "08:00:00",
        "region": "osrednja_slovenija",
        "meeting_point": "Ljubljana, Kongresni trg",
        "notes": None,
        "cancelled": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_race(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "name": "Maraton Franja",
        "race_date": "2099-06-07",
        "race_type": "Cestna",
        "region": "Osrednja Slovenija",
        "link": "https://www.franja.org",
        "created_at": datetime.now(timezone.utc).isoformat(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


GPX_THREE_POINTS = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test">
  <trk><trkseg>
    <trkpt lat="46.0" lon="14.5"><ele>500</ele></trkpt>
    <trkpt lat="46.0" lon="14.51"><ele>520</ele></trkpt>
    <trkpt lat="46.01" lon="14.51"><ele>510</ele></trkpt>
  </trkseg></trk>
</gpx>
"""
