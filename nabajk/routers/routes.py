"""Routes router — cycling routes with GPX upload."""

import html
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from postgrest.exceptions import APIError

from nabajk.config import WEB_TEMPLATES_DIR
from nabajk import supabase_client as db
from nabajk.routers.auth import not_found, require_admin, validation_failure, write_failure
from nabajk.services import track_geometry
from nabajk.services.routes import (
    DIFFICULTIES,
    REGIONS,
    apply_gpx,
    build_payload,
    create_route,
    delete_route,
    get_routes,
    region_label,
    toggle_published,
    update_route,
    validate_route,
)

router = APIRouter(prefix="/admin/routes", dependencies=[Depends(require_admin)])
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))
templates.env.globals["region_label"] = region_label


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def _gpx_error(message: str) -> HTMLResponse:
    return HTMLResponse(
        f'<div class="nb-alert nb-alert--error">{html.escape(message)}</div>',
        status_code=400,
    )


def _form_context(route: dict | None) -> dict:
    return {
        "active_page": "routes",
        "route": route,
        "regions": REGIONS,
        "difficulties": DIFFICULTIES,
    }


@router.get("/")
async def routes_index(
    request: Request,
    q: str = Query(""),
    region: str = Query(""),
):
    return templates.TemplateResponse(request, "admin/routes.html", {
        "active_page": "routes",
        "routes": get_routes(search=q, region=region),
        "regions": REGIONS,
        "search": q,
        "region": region,
    })


@router.get("/new")
async def route_new(request: Request):
    return templates.TemplateResponse(request, "admin/route_form.html", _form_context(None))


@router.post("/gpx/preview")
async def gpx_preview(gpx_file: UploadFile = File(...)):
    """Parse a track without saving it and show distance and climbing."""
    summary = track_geometry.parse_upload(gpx_file.filename or "", await gpx_file.read())
    if not summary.ok:
        return _gpx_error(summary.error)
    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        f'{summary.point_count} points · {summary.distance_km:.2f} km · '
        f'{summary.elevation_gain_m} m climbing'
        '</div>'
    )


@router.post("/")
async def route_create(
    request: Request,
    title: str = Form(""),
    difficulty: str = Form("medium"),
    region: str = Form("gorenjska"),
    traffic: str = Form(""),
    road_condition: str = Form(""),
    why_good: str = Form(""),
    published: bool = Form(False),
    gpx_file: Optional[UploadFile] = File(None),
):
    errors = validate_route({"title": title, "difficulty": difficulty, "region": region})
    if errors:
        return validation_failure(errors)

    payload = build_payload(title, difficulty, region, traffic, road_condition, why_good, published)
    payload.update({"gpx_data": None, "distance_km": None, "elevation_m": None})
    if _has_file(gpx_file):
        summary = apply_gpx(payload, gpx_file.filename, await gpx_file.read())
        if not summary.ok:
            return _gpx_error(summary.error)

    try:
        create_route(payload)
    except APIError as e:
        return write_failure(request, "CREATE", "route", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Route created. <a href="/admin/routes/">Back to routes</a>'
        '</div>'
    )


@router.get("/{route_id}")
async def route_edit(request: Request, route_id: str):
    route = db.get_route(route_id)
    if not route:
        return not_found("Route")
    return templates.TemplateResponse(request, "admin/route_form.html", _form_context(route))


@router.post("/{route_id}")
async def route_update(
    request: Request,
    route_id: str,
    title: str = Form(""),
    difficulty: str = Form("medium"),
    region: str = Form("gorenjska"),
    traffic: str = Form(""),
    road_condition: str = Form(""),
    why_good: str = Form(""),
    published: bool = Form(False),
    gpx_file: Optional[UploadFile] = File(None),
):
    if not db.get_route(route_id):
        return not_found("Route")

    errors = validate_route({"title": title, "difficulty": difficulty, "region": region})
    if errors:
        return validation_failure(errors)

    # Without a new file the stored track and its stats stay as they are
    payload = build_payload(title, difficulty, region, traffic, road_condition, why_good, published)
    if _has_file(gpx_file):
        summary = apply_gpx(payload, gpx_file.filename, await gpx_file.read())
        if not summary.ok:
            return _gpx_error(summary.error)

    try:
        update_route(route_id, payload)
    except APIError as e:
        return write_failure(request, "UPDATE", "route", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Route saved. <a href="/admin/routes/">Back to routes</a>'
        '</div>'
    )


@router.post("/{route_id}/publish")
async def route_toggle_published(request: Request, route_id: str):
    try:
        route = toggle_published(route_id)
    except APIError as e:
        return write_failure(request, "UPDATE", "route", e)
    if route is None:
        return not_found("Route")

    label = "Published" if route.get("published") else "Draft"
    return HTMLResponse(f'<span class="nb-badge nb-badge--{label.lower()}">{label}</span>')


@router.post("/{route_id}/delete")
async def route_delete(request: Request, route_id: str):
    try:
        removed = delete_route(route_id)
    except APIError as e:
        return write_failure(request, "DELETE", "route", e)
    if not removed:
        return not_found("Route")
    return HTMLResponse("")
