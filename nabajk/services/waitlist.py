"""Waitlist signups from the landing page."""

import logging
import re

from postgrest.exceptions import APIError

from nabajk import supabase_client as db
from nabajk.i18n import LOCALES

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MAX_EMAIL_LEN = 320

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def normalize_email(email: str) -> str | None:
    """Trim and lowercase; None when it doesn't look like an address."""
    email = (email or "").strip().lower()
    if not email or len(email) > _MAX_EMAIL_LEN or not EMAIL_RE.match(email):
        return None
    return email


def add_to_waitlist(email: str, locale: str) -> str:
    """Store a signup.

    Returns ``"ok"``, ``"invalid"``, ``"duplicate"`` or ``"error"``.
    """
    normalized = normalize_email(email)
    if normalized is None or locale not in LOCALES:
        return "invalid"

    if not db.is_configured():
        logger.info("[DEV MODE] Would add to waitlist: %s (%s)", normalized, locale)
        return "ok"

    try:
        db.add_waitlist_entry(normalized, locale)
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            return "duplicate"
        logger.error("Waitlist insert failed: %s (code %s)", e.message, e.code)
        return "error"

    logger.info("Waitlist signup (%s)", locale)
    return "ok"


def waitlist_counts() -> dict:
    """Signups per locale, for the dashboard."""
    counts = {locale: db.count_waitlist(locale) for locale in LOCALES}
    counts["total"] = sum(counts.values())
    return counts
