"""Routes service — curated cycling routes with GPX-derived stats."""

import logging

from nabajk import supabase_client as db
from nabajk.services import track_geometry
from nabajk.services.track_geometry import GeometrySummary

logger = logging.getLogger(__name__)

REGIONS = [
    {"value": "gorenjska", "label": "Gorenjska"},
    {"value": "dolenjska", "label": "Dolenjska"},
    {"value": "stajerska", "label": "Štajerska"},
    {"value": "primorska", "label": "Primorska"},
    {"value": "osrednja_slovenija", "label": "Osrednja Slovenija"},
    {"value": "prekmurje", "label": "Prekmurje"},
]
REGION_VALUES = [r["value"] for r in REGIONS]

DIFFICULTIES = ["easy", "medium", "hard"]


def region_label(value: str | None) -> str:
    for region in REGIONS:
        if region["value"] == value:
            return region["label"]
    return value or ""


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def validate_route(data: dict) -> dict:
    """Return ``{field: message}``; empty when valid."""
    errors = {}
    if not (data.get("title") or "").strip():
        errors["title"] = "Title is required"
    if data.get("difficulty") not in DIFFICULTIES:
        errors["difficulty"] = "Difficulty must be easy, medium or hard"
    if data.get("region") not in REGION_VALUES:
        errors["region"] = "Unknown region"
    return errors


def build_payload(title: str, difficulty: str, region: str, traffic: str = "",
                  road_condition: str = "", why_good: str = "",
                  published: bool = False) -> dict:
    """Form values -> table row. GPX fields are set separately."""
    return {
        "title": title.strip(),
        "difficulty": difficulty,
        "region": region,
        "traffic": _blank_to_none(traffic),
        "road_condition": _blank_to_none(road_condition),
        "why_good": _blank_to_none(why_good),
        "published": published,
    }


def apply_gpx(payload: dict, filename: str, content: bytes) -> GeometrySummary:
    """Parse an uploaded track and copy text, distance and gain into ``payload``.

    ``payload`` is left untouched when the track is rejected.
    """
    summary = track_geometry.parse_upload(filename, content)
    if summary.ok:
        payload["gpx_data"] = content.decode("utf-8-sig")
        payload["distance_km"] = summary.distance_km
        payload["elevation_m"] = summary.elevation_gain_m
        logger.info("GPX %s: %d points, %.2f km, %d m",
                    filename, summary.point_count, summary.distance_km, summary.elevation_gain_m)
    return summary


def filter_routes(routes: list[dict], search: str = "", region: str = "") -> list[dict]:
    """Title search plus optional region filter."""
    q = search.strip().lower()
    return [
        r for r in routes
        if (not q or q in (r.get("title") or "").lower())
        and (not region or r.get("region") == region)
    ]


def get_routes(search: str = "", region: str = "") -> list[dict]:
    return filter_routes(db.get_routes(), search, region)


def create_route(payload: dict) -> dict:
    row = db.create_route(payload)
    logger.info("[CREATE] routes %s", row.get("id"))
    return row


def update_route(route_id: str, payload: dict) -> dict:
    row = db.update_route(route_id, payload)
    logger.info("[UPDATE] routes %s", route_id)
    return row


def delete_route(route_id: str) -> bool:
    removed = db.delete_route(route_id)
    logger.info("[DELETE] routes %s", route_id)
    return bool(removed)


def toggle_published(route_id: str) -> dict | None:
    current = db.get_route(route_id)
    if not current:
        return None
    return update_route(route_id, {"published": not current.get("published")})
