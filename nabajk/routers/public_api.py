"""Public API — read-only JSON feeds for the NaBajk mobile app.

Announcements currently visible in a language, and the upcoming race
calendar. Documented at /api/v1/docs.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Request

from nabajk import supabase_client as db
from nabajk.routers.auth import RateLimiter
from nabajk.services.announcements import LANGUAGES, active_announcements

router = APIRouter()

feed_limiter = RateLimiter(60)


@router.get(
    "/api/v1/announcements",
    summary="Announcements currently shown in the app",
    description="Active announcements for one language whose display window includes now.",
    tags=["App"],
)
async def list_announcements(
    request: Request,
    lang: str = Query("sl", description="'sl' or 'en'"),
):
    feed_limiter.check(request)
    if lang not in LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Unsupported language '{lang}'")

    results = [
        {k: a.get(k) for k in ("id", "title", "body", "language", "start_date", "end_date")}
        for a in active_announcements(lang)
    ]
    return {"count": len(results), "results": results}


@router.get(
    "/api/v1/races",
    summary="Upcoming races",
    description="Races from today on, soonest first.",
    tags=["App"],
)
async def list_races(
    request: Request,
    limit: int = Query(50, ge=1, le=200, description="Max results"),
):
    feed_limiter.check(request)
    today = date.today().isoformat()
    results = [r for r in db.get_races() if (r.get("race_date") or "") >= today][:limit]
    return {
        "count": len(results),
        "results": [
            {k: r.get(k) for k in ("id", "name", "race_date", "race_type", "region", "link")}
            for r in results
        ],
    }
