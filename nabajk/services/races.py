"""Races service — race calendar CRUD and table import."""

import logging
import re
from urllib.parse import urlparse

from nabajk import supabase_client as db
from nabajk.services.batch_upload import BatchUploadDriver, ProgressCallback, UploadOutcome
from nabajk.services.race_import import ImportRow, normalize_url

logger = logging.getLogger(__name__)

RACE_TYPES = ["Cestna", "Kronometer", "Vzpon"]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_url(value: str) -> bool:
    """Blank is valid (optional field); otherwise must be an http(s) host."""
    if not (value or "").strip():
        return True
    parsed = urlparse(normalize_url(value))
    host = parsed.hostname or ""
    return parsed.scheme in ("http", "https") and bool(host) and " " not in value.strip() \
        and ("." in host or host == "localhost")


def validate_race(data: dict) -> dict:
    """Return ``{field: message}``; empty when valid."""
    errors = {}
    if not (data.get("name") or "").strip():
        errors["name"] = "Name is required"
    if not data.get("race_date"):
        errors["race_date"] = "Date is required"
    elif not _DATE_RE.match(data["race_date"]):
        errors["race_date"] = "Date must be YYYY-MM-DD"
    if data.get("link") and not is_valid_url(data["link"]):
        errors["link"] = "Please enter a valid URL"
    return errors


def build_payload(name: str, race_date: str, race_type: str = "",
                  region: str = "", link: str = "") -> dict:
    return {
        "name": name.strip(),
        "race_date": race_date,
        "race_type": race_type.strip() or None,
        "region": region.strip() or None,
        "link": normalize_url(link),
    }


def filter_races(races: list[dict], search: str = "") -> list[dict]:
    """Case-insensitive match on name or region."""
    q = search.strip().lower()
    if not q:
        return list(races)
    return [
        r for r in races
        if q in (r.get("name") or "").lower() or q in (r.get("region") or "").lower()
    ]


def get_races(search: str = "") -> list[dict]:
    return filter_races(db.get_races(), search)


def create_race(payload: dict) -> dict:
    row = db.create_race(payload)
    logger.info("[CREATE] races %s", row.get("id"))
    return row


def update_race(race_id: str, payload: dict) -> dict:
    row = db.update_race(race_id, payload)
    logger.info("[UPDATE] races %s", race_id)
    return row


def delete_race(race_id: str) -> bool:
    removed = db.delete_race(race_id)
    logger.info("[DELETE] races %s", race_id)
    return bool(removed)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def submit_import_row(row: ImportRow) -> None:
    """Insert one imported race. APIError propagates to the batch driver."""
    db.create_race(row.to_record())


# One import at a time across the whole process
import_driver = BatchUploadDriver(submit_import_row)


def import_races(rows: list[ImportRow], on_progress: ProgressCallback | None = None) -> UploadOutcome:
    """Insert parsed rows one by one. Raises BatchInProgressError if busy."""
    logger.info("[IMPORT] races: %d rows", len(rows))
    return import_driver.run(rows, on_progress=on_progress)
