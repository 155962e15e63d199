"""Group rides service — moderation of rides created in the app."""

import logging
import re

from nabajk import supabase_client as db
from nabajk.services.routes import REGION_VALUES

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")


def validate_group_ride(data: dict) -> dict:
    """Return ``{field: message}``; empty when valid."""
    errors = {}
    if not (data.get("title") or "").strip():
        errors["title"] = "Title is required"
    if not _DATE_RE.match(data.get("ride_date") or ""):
        errors["ride_date"] = "Date is required (YYYY-MM-DD)"
    if not _TIME_RE.match(data.get("ride_time") or ""):
        errors["ride_time"] = "Time is required (HH:MM)"
    if data.get("region") not in REGION_VALUES:
        errors["region"] = "Unknown region"
    if not (data.get("meeting_point") or "").strip():
        errors["meeting_point"] = "Meeting point is required"
    return errors


def build_payload(title: str, ride_date: str, ride_time: str, region: str,
                  meeting_point: str, notes: str = "", cancelled: bool = False) -> dict:
    return {
        "title": title.strip(),
        "ride_date": ride_date,
        "ride_time": ride_time,
        "region": region,
        "meeting_point": meeting_point.strip(),
        "notes": notes.strip() or None,
        "cancelled": cancelled,
    }


def filter_group_rides(rides: list[dict], search: str = "", region: str = "",
                       show_cancelled: bool = False) -> list[dict]:
    """Search title/meeting point, filter region, hide cancelled by default."""
    q = search.strip().lower()
    result = []
    for ride in rides:
        if q and q not in (ride.get("title") or "").lower() \
                and q not in (ride.get("meeting_point") or "").lower():
            continue
        if region and ride.get("region") != region:
            continue
        if ride.get("cancelled") and not show_cancelled:
            continue
        result.append(ride)
    return result


def get_group_rides(search: str = "", region: str = "", show_cancelled: bool = False) -> list[dict]:
    return filter_group_rides(db.get_group_rides(), search, region, show_cancelled)


def update_group_ride(ride_id: str, payload: dict) -> dict:
    row = db.update_group_ride(ride_id, payload)
    logger.info("[UPDATE] group_rides %s", ride_id)
    return row


def cancel_group_ride(ride_id: str) -> dict:
    """Soft delete: hidden from the public list, kept in the table."""
    row = db.update_group_ride(ride_id, {"cancelled": True})
    logger.info("[CANCEL] group_rides %s", ride_id)
    return row


def restore_group_ride(ride_id: str) -> dict:
    row = db.update_group_ride(ride_id, {"cancelled": False})
    logger.info("[RESTORE] group_rides %s", ride_id)
    return row


def delete_group_ride(ride_id: str) -> bool:
    removed = db.delete_group_ride(ride_id)
    logger.info("[DELETE] group_rides %s", ride_id)
    return bool(removed)
