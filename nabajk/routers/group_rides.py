"""Group rides router — edit, cancel and restore rides created in the app."""

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from postgrest.exceptions import APIError

from nabajk.config import WEB_TEMPLATES_DIR
from nabajk import supabase_client as db
from nabajk.routers.auth import not_found, require_admin, validation_failure, write_failure
from nabajk.services.group_rides import (
    build_payload,
    cancel_group_ride,
    delete_group_ride,
    get_group_rides,
    restore_group_ride,
    update_group_ride,
    validate_group_ride,
)
from nabajk.services.routes import REGIONS, region_label

router = APIRouter(prefix="/admin/group-rides", dependencies=[Depends(require_admin)])
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))
templates.env.globals["region_label"] = region_label


def _status_badge(ride: dict) -> HTMLResponse:
    if ride.get("cancelled"):
        return HTMLResponse('<span class="nb-badge nb-badge--cancelled">Cancelled</span>')
    return HTMLResponse('<span class="nb-badge nb-badge--active">Active</span>')


@router.get("/")
async def group_rides_index(
    request: Request,
    q: str = Query(""),
    region: str = Query(""),
    show_cancelled: bool = Query(False),
):
    return templates.TemplateResponse(request, "admin/group_rides.html", {
        "active_page": "group_rides",
        "rides": get_group_rides(search=q, region=region, show_cancelled=show_cancelled),
        "regions": REGIONS,
        "search": q,
        "region": region,
        "show_cancelled": show_cancelled,
    })


@router.get("/{ride_id}")
async def group_ride_edit(request: Request, ride_id: str):
    ride = db.get_group_ride(ride_id)
    if not ride:
        return not_found("Group ride")
    return templates.TemplateResponse(request, "admin/group_ride_form.html", {
        "active_page": "group_rides",
        "ride": ride,
        "regions": REGIONS,
    })


@router.post("/{ride_id}")
async def group_ride_update(
    request: Request,
    ride_id: str,
    title: str = Form(""),
    ride_date: str = Form(""),
    ride_time: str = Form(""),
    region: str = Form(""),
    meeting_point: str = Form(""),
    notes: str = Form(""),
    cancelled: bool = Form(False),
):
    if not db.get_group_ride(ride_id):
        return not_found("Group ride")

    raw = {"title": title, "ride_date": ride_date, "ride_time": ride_time,
           "region": region, "meeting_point": meeting_point}
    errors = validate_group_ride(raw)
    if errors:
        return validation_failure(errors)

    try:
        update_group_ride(
            ride_id,
            build_payload(title, ride_date, ride_time, region, meeting_point, notes, cancelled),
        )
    except APIError as e:
        return write_failure(request, "UPDATE", "group ride", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Group ride saved. <a href="/admin/group-rides/">Back to group rides</a>'
        '</div>'
    )


@router.post("/{ride_id}/cancel")
async def group_ride_cancel(request: Request, ride_id: str):
    try:
        ride = cancel_group_ride(ride_id)
    except APIError as e:
        return write_failure(request, "CANCEL", "group ride", e)
    if not ride:
        return not_found("Group ride")
    return _status_badge(ride)


@router.post("/{ride_id}/restore")
async def group_ride_restore(request: Request, ride_id: str):
    try:
        ride = restore_group_ride(ride_id)
    except APIError as e:
        return write_failure(request, "RESTORE", "group ride", e)
    if not ride:
        return not_found("Group ride")
    return _status_badge(ride)


@router.post("/{ride_id}/delete")
async def group_ride_delete(request: Request, ride_id: str):
    try:
        removed = delete_group_ride(ride_id)
    except APIError as e:
        return write_failure(request, "DELETE", "group ride", e)
    if not removed:
        return not_found("Group ride")
    return HTMLResponse("")
