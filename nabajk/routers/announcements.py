"""Announcements router — in-app announcement management."""

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from postgrest.exceptions import APIError

from nabajk.config import WEB_TEMPLATES_DIR
from nabajk import supabase_client as db
from nabajk.routers.auth import not_found, require_admin, validation_failure, write_failure
from nabajk.services.announcements import (
    LANGUAGES,
    build_payload,
    create_announcement,
    delete_announcement,
    get_announcements,
    toggle_active,
    update_announcement,
    validate_announcement,
)

router = APIRouter(prefix="/admin/announcements", dependencies=[Depends(require_admin)])
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@router.get("/")
async def announcements_index(
    request: Request,
    language: str = Query(""),
    status: str = Query(""),
):
    active = {"active": True, "inactive": False}.get(status)
    return templates.TemplateResponse(request, "admin/announcements.html", {
        "active_page": "announcements",
        "announcements": get_announcements(language=language or None, active=active),
        "languages": LANGUAGES,
        "language": language,
        "status": status,
    })


@router.get("/new")
async def announcement_new(request: Request):
    return templates.TemplateResponse(request, "admin/announcement_form.html", {
        "active_page": "announcements",
        "announcement": None,
        "languages": LANGUAGES,
    })


@router.post("/")
async def announcement_create(
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    language: str = Form("sl"),
    active: bool = Form(False),
    start_date: str = Form(""),
    end_date: str = Form(""),
):
    raw = {"title": title, "body": body, "language": language,
           "start_date": start_date, "end_date": end_date}
    errors = validate_announcement(raw)
    if errors:
        return validation_failure(errors)

    try:
        create_announcement(build_payload(title, body, language, active, start_date, end_date))
    except APIError as e:
        return write_failure(request, "CREATE", "announcement", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Announcement created. <a href="/admin/announcements/">Back to announcements</a>'
        '</div>'
    )


@router.get("/{announcement_id}")
async def announcement_edit(request: Request, announcement_id: str):
    announcement = db.get_announcement(announcement_id)
    if not announcement:
        return not_found("Announcement")
    return templates.TemplateResponse(request, "admin/announcement_form.html", {
        "active_page": "announcements",
        "announcement": announcement,
        "languages": LANGUAGES,
    })


@router.post("/{announcement_id}")
async def announcement_update(
    request: Request,
    announcement_id: str,
    title: str = Form(""),
    body: str = Form(""),
    language: str = Form("sl"),
    active: bool = Form(False),
    start_date: str = Form(""),
    end_date: str = Form(""),
):
    if not db.get_announcement(announcement_id):
        return not_found("Announcement")

    raw = {"title": title, "body": body, "language": language,
           "start_date": start_date, "end_date": end_date}
    errors = validate_announcement(raw)
    if errors:
        return validation_failure(errors)

    try:
        update_announcement(
            announcement_id,
            build_payload(title, body, language, active, start_date, end_date),
        )
    except APIError as e:
        return write_failure(request, "UPDATE", "announcement", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Announcement saved. <a href="/admin/announcements/">Back to announcements</a>'
        '</div>'
    )


@router.post("/{announcement_id}/toggle")
async def announcement_toggle(request: Request, announcement_id: str):
    try:
        announcement = toggle_active(announcement_id)
    except APIError as e:
        return write_failure(request, "UPDATE", "announcement", e)
    if announcement is None:
        return not_found("Announcement")

    label = "Active" if announcement.get("active") else "Inactive"
    return HTMLResponse(f'<span class="nb-badge nb-badge--{label.lower()}">{label}</span>')


@router.post("/{announcement_id}/delete")
async def announcement_delete(request: Request, announcement_id: str):
    try:
        removed = delete_announcement(announcement_id)
    except APIError as e:
        return write_failure(request, "DELETE", "announcement", e)
    if not removed:
        return not_found("Announcement")
    # Empty body: HTMX swaps the table row out
    return HTMLResponse("")
