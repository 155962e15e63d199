"""Announcements service — in-app announcement CRUD + visibility window."""

import logging
import re
from datetime import datetime, timezone

from nabajk import supabase_client as db

logger = logging.getLogger(__name__)

LANGUAGES = ["sl", "en"]

# PostgREST trims trailing zeros from fractional seconds
_FRACTION = re.compile(r"\.(\d{1,6})\d*(?=[+-]|$)")


def _parse_dt(value: str | None) -> datetime | None:
    """ISO timestamp (or ``YYYY-MM-DDTHH:MM`` from a form) -> aware datetime."""
    if not value:
        return None
    value = value.replace("Z", "+00:00")
    value = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0"), value, count=1)
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def validate_announcement(data: dict) -> dict:
    """Return ``{field: message}``; empty when valid."""
    errors = {}
    if not (data.get("title") or "").strip():
        errors["title"] = "Title is required"
    if not (data.get("body") or "").strip():
        errors["body"] = "Body is required"
    if data.get("language") not in LANGUAGES:
        errors["language"] = "Language must be sl or en"

    try:
        start = _parse_dt(data.get("start_date"))
        end = _parse_dt(data.get("end_date"))
    except ValueError:
        errors["start_date"] = "Dates must be ISO formatted"
    else:
        if start and end and end < start:
            errors["end_date"] = "End must not be before start"
    return errors


def build_payload(title: str, body: str, language: str, active: bool,
                  start_date: str = "", end_date: str = "") -> dict:
    """Form values -> table row. Blank dates become NULL."""
    start = _parse_dt(start_date.strip()) if start_date and start_date.strip() else None
    end = _parse_dt(end_date.strip()) if end_date and end_date.strip() else None
    return {
        "title": title.strip(),
        "body": body.strip(),
        "language": language,
        "active": active,
        "start_date": start.isoformat() if start else None,
        "end_date": end.isoformat() if end else None,
    }


def get_announcements(language: str | None = None, active: bool | None = None) -> list[dict]:
    """Announcements newest first, optionally filtered."""
    rows = db.get_announcements()
    if language:
        rows = [r for r in rows if r.get("language") == language]
    if active is not None:
        rows = [r for r in rows if bool(r.get("active")) == active]
    return rows


def create_announcement(payload: dict) -> dict:
    row = db.create_announcement(payload)
    logger.info("[CREATE] announcements %s", row.get("id"))
    return row


def update_announcement(announcement_id: str, payload: dict) -> dict:
    row = db.update_announcement(announcement_id, payload)
    logger.info("[UPDATE] announcements %s", announcement_id)
    return row


def delete_announcement(announcement_id: str) -> bool:
    removed = db.delete_announcement(announcement_id)
    logger.info("[DELETE] announcements %s", announcement_id)
    return bool(removed)


def toggle_active(announcement_id: str) -> dict | None:
    """Flip the active flag. None if the announcement doesn't exist."""
    current = db.get_announcement(announcement_id)
    if not current:
        return None
    return update_announcement(announcement_id, {"active": not current.get("active")})


def is_visible(announcement: dict, now: datetime | None = None) -> bool:
    """Active and inside the optional start/end window."""
    if not announcement.get("active"):
        return False
    now = now or datetime.now(timezone.utc)
    try:
        start = _parse_dt(announcement.get("start_date"))
        end = _parse_dt(announcement.get("end_date"))
    except ValueError:
        logger.warning("Announcement %s has unreadable dates, hiding it", announcement.get("id"))
        return False
    if start and now < start:
        return False
    if end and now > end:
        return False
    return True


def active_announcements(language: str, now: datetime | None = None) -> list[dict]:
    """Announcements the app should show right now in ``language``."""
    return [a for a in get_announcements(language=language) if is_visible(a, now)]
