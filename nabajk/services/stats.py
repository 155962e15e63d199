"""Dashboard aggregation queries — Supabase."""

from datetime import date

from nabajk import supabase_client as db
from nabajk.services.waitlist import waitlist_counts


def dashboard_stats() -> dict:
    """Return record counts for the admin dashboard."""
    waitlist = waitlist_counts()
    return {
        "announcements": db.count("announcements"),
        "active_announcements": db.count("announcements", {"active": True}),
        "routes": db.count("routes"),
        "published_routes": db.count("routes", {"published": True}),
        "group_rides": db.count("group_rides"),
        "cancelled_rides": db.count("group_rides", {"cancelled": True}),
        "races": db.count("races"),
        "waitlist": waitlist["total"],
        "waitlist_sl": waitlist["sl"],
        "waitlist_en": waitlist["en"],
    }


def upcoming_races(limit: int = 5, today: date | None = None) -> list[dict]:
    """Next races from today on, soonest first."""
    today_iso = (today or date.today()).isoformat()
    q = db._table("races").select("id, name, race_date, race_type, region")
    q = q.gte("race_date", today_iso).order("race_date").limit(limit)
    result = q.execute()
    return result.data or []


def upcoming_group_rides(limit: int = 5, today: date | None = None) -> list[dict]:
    """Next rides that are not cancelled."""
    today_iso = (today or date.today()).isoformat()
    q = db._table("group_rides").select("id, title, ride_date, ride_time, region, meeting_point")
    q = q.gte("ride_date", today_iso).eq("cancelled", False).order("ride_date").limit(limit)
    result = q.execute()
    return result.data or []
