"""Supabase connection and query helpers for the NaBajk tables."""

import logging
import threading
from datetime import datetime, timezone

from supabase import Client, create_client

from nabajk.config import SUPABASE_ANON_KEY, SUPABASE_SERVICE_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

_client: Client | None = None
_client_lock = threading.Lock()


def is_configured() -> bool:
    """True when Supabase credentials are present in the environment."""
    return bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)


def get_client() -> Client:
    """Return the Supabase client singleton (thread-safe)."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                if not is_configured():
                    raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
                _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _client


def new_client() -> Client:
    """Return an unshared client for password sign-ins.

    Signing in swaps the auth header on the client that performed it, so the
    shared service client must never be used for that.
    """
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return create_client(SUPABASE_URL, SUPABASE_ANON_KEY)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _table(name: str):
    """Return a table query builder."""
    return get_client().table(name)


def insert(table: str, data: dict) -> dict:
    """Insert a row and return it."""
    result = _table(table).insert(data).execute()
    return result.data[0] if result.data else {}


def update(table: str, data: dict, match: dict) -> dict:
    """Update rows matching conditions."""
    q = _table(table).update(data)
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data[0] if result.data else {}


def delete(table: str, match: dict) -> list:
    """Delete rows matching conditions."""
    q = _table(table).delete()
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data


def select(table: str, columns: str = "*", match: dict | None = None,
           order: str | list[str] | None = None, order_desc: bool = False,
           limit: int | None = None) -> list[dict]:
    """Select rows with optional filtering and ordering.

    ``order`` may be a list of columns, applied in sequence.
    """
    q = _table(table).select(columns)
    if match:
        for k, v in match.items():
            q = q.eq(k, v)
    if order:
        for col in [order] if isinstance(order, str) else order:
            q = q.order(col, desc=order_desc)
    if limit:
        q = q.limit(limit)
    result = q.execute()
    return result.data or []


def select_one(table: str, columns: str = "*", match: dict | None = None) -> dict | None:
    """Select a single row."""
    rows = select(table, columns, match, limit=1)
    return rows[0] if rows else None


def count(table: str, match: dict | None = None) -> int:
    """Count rows matching conditions."""
    q = _table(table).select("*", count="exact")
    if match:
        for k, v in match.items():
            q = q.eq(k, v)
    result = q.execute()
    return result.count or 0


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------

def get_announcements() -> list[dict]:
    """All announcements, newest first."""
    return select("announcements", order="created_at", order_desc=True)


def get_announcement(announcement_id: str) -> dict | None:
    return select_one("announcements", match={"id": announcement_id})


def create_announcement(data: dict) -> dict:
    return insert("announcements", data)


def update_announcement(announcement_id: str, data: dict) -> dict:
    data["updated_at"] = _now()
    return update("announcements", data, {"id": announcement_id})


def delete_announcement(announcement_id: str) -> list:
    return delete("announcements", {"id": announcement_id})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def get_routes() -> list[dict]:
    """All routes, newest first."""
    return select("routes", order="created_at", order_desc=True)


def get_route(route_id: str) -> dict | None:
    return select_one("routes", match={"id": route_id})


def create_route(data: dict) -> dict:
    return insert("routes", data)


def update_route(route_id: str, data: dict) -> dict:
    data["updated_at"] = _now()
    return update("routes", data, {"id": route_id})


def delete_route(route_id: str) -> list:
    return delete("routes", {"id": route_id})


# ---------------------------------------------------------------------------
# Group rides
# ---------------------------------------------------------------------------

def get_group_rides() -> list[dict]:
    """All group rides ordered by date, then time."""
    return select("group_rides", order=["ride_date", "ride_time"])


def get_group_ride(ride_id: str) -> dict | None:
    return select_one("group_rides", match={"id": ride_id})


def update_group_ride(ride_id: str, data: dict) -> dict:
    data["updated_at"] = _now()
    return update("group_rides", data, {"id": ride_id})


def delete_group_ride(ride_id: str) -> list:
    return delete("group_rides", {"id": ride_id})


# ---------------------------------------------------------------------------
# Races
# ---------------------------------------------------------------------------

def get_races() -> list[dict]:
    """All races ordered by date, soonest first."""
    return select("races", order="race_date")


def get_race(race_id: str) -> dict | None:
    return select_one("races", match={"id": race_id})


def create_race(data: dict) -> dict:
    return insert("races", data)


def update_race(race_id: str, data: dict) -> dict:
    data["updated_at"] = _now()
    return update("races", data, {"id": race_id})


def delete_race(race_id: str) -> list:
    return delete("races", {"id": race_id})


# ---------------------------------------------------------------------------
# Waitlist
# ---------------------------------------------------------------------------

def add_waitlist_entry(email: str, locale: str) -> dict:
    """Insert a waitlist signup. Duplicate emails raise APIError 23505."""
    return insert("waitlist", {"email": email, "locale": locale})


def count_waitlist(locale: str | None = None) -> int:
    match = {"locale": locale} if locale else None
    return count("waitlist", match)


# ---------------------------------------------------------------------------
# Admins
# ---------------------------------------------------------------------------

def get_admin_by_user_id(user_id: str) -> dict | None:
    """Return the admins row for a Supabase Auth user, if any."""
    return select_one("admins", columns="id, user_id", match={"user_id": user_id})
