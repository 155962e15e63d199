"""Races router — race calendar CRUD and table import."""

import asyncio
import html
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from postgrest.exceptions import APIError

from nabajk.config import WEB_TEMPLATES_DIR
from nabajk import supabase_client as db
from nabajk.routers.auth import not_found, require_admin, validation_failure, write_failure
from nabajk.services.batch_upload import BatchInProgressError, UploadOutcome
from nabajk.services.race_import import ImportBatchResult, parse_race_table
from nabajk.services.races import (
    RACE_TYPES,
    build_payload,
    create_race,
    delete_race,
    get_races,
    import_races,
    update_race,
    validate_race,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/races", dependencies=[Depends(require_admin)])
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))

IMPORT_MAX_BYTES = 1024 * 1024


async def _read_table(text: str, table_file: Optional[UploadFile]) -> str | None:
    """Pasted text, or the uploaded file when one was chosen. None if too large."""
    if table_file is not None and table_file.filename:
        content = await table_file.read()
        if len(content) > IMPORT_MAX_BYTES:
            return None
        return content.decode("utf-8-sig", errors="replace")
    return text


def _too_large() -> HTMLResponse:
    return HTMLResponse(
        '<div class="nb-alert nb-alert--error">File too large (max 1MB)</div>',
        status_code=400,
    )


def _parse_errors_html(result: ImportBatchResult) -> str:
    if not result.parse_errors:
        return ""
    items = "".join(f"<li>{html.escape(msg)}</li>" for msg in result.error_messages)
    return f'<div class="nb-alert nb-alert--error"><ul>{items}</ul></div>'


def _outcome_html(outcome: UploadOutcome) -> str:
    if not outcome.has_failures:
        return (
            '<div class="nb-alert nb-alert--success">'
            f'Imported {outcome.success_count} races. '
            '<a href="/admin/races/">Back to races</a>'
            '</div>'
        )
    items = "".join(
        f"<li>{html.escape(f.row_name)}: {html.escape(f.message)}"
        f"{f' (Code: {html.escape(f.code)})' if f.code else ''}</li>"
        for f in outcome.failures
    )
    return (
        '<div class="nb-alert nb-alert--warning">'
        f'Imported {outcome.success_count} of {outcome.attempted} races. '
        f'{len(outcome.failures)} failed:<ul>{items}</ul>'
        '</div>'
    )


@router.get("/")
async def races_index(request: Request, q: str = Query("")):
    return templates.TemplateResponse(request, "admin/races.html", {
        "active_page": "races",
        "races": get_races(search=q),
        "search": q,
    })


@router.get("/new")
async def race_new(request: Request):
    return templates.TemplateResponse(request, "admin/race_form.html", {
        "active_page": "races",
        "race": None,
        "race_types": RACE_TYPES,
    })


@router.post("/")
async def race_create(
    request: Request,
    name: str = Form(""),
    race_date: str = Form(""),
    race_type: str = Form(""),
    region: str = Form(""),
    link: str = Form(""),
):
    errors = validate_race({"name": name, "race_date": race_date, "link": link})
    if errors:
        return validation_failure(errors)

    try:
        create_race(build_payload(name, race_date, race_type, region, link))
    except APIError as e:
        return write_failure(request, "CREATE", "race", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Race created. <a href="/admin/races/">Back to races</a>'
        '</div>'
    )


# ---------------------------------------------------------------------------
# Import (declared before /{race_id} so the path isn't captured as an id)
# ---------------------------------------------------------------------------

@router.get("/import")
async def races_import_page(request: Request):
    return templates.TemplateResponse(request, "admin/races_import.html", {
        "active_page": "races",
    })


@router.post("/import/preview")
async def races_import_preview(
    request: Request,
    text: str = Form(""),
    table_file: Optional[UploadFile] = File(None),
):
    raw = await _read_table(text, table_file)
    if raw is None:
        return _too_large()

    result = parse_race_table(raw)
    return templates.TemplateResponse(request, "admin/_import_preview.html", {
        "result": result,
        "text": raw,
    })


@router.post("/import")
async def races_import(
    text: str = Form(""),
    table_file: Optional[UploadFile] = File(None),
):
    raw = await _read_table(text, table_file)
    if raw is None:
        return _too_large()

    result = parse_race_table(raw)
    if not result.rows:
        return HTMLResponse(
            '<div class="nb-alert nb-alert--error">No valid rows to import.</div>'
            + _parse_errors_html(result),
            status_code=400,
        )

    # The driver blocks per row; keep it off the event loop
    try:
        outcome = await asyncio.to_thread(import_races, list(result.rows))
    except BatchInProgressError:
        logger.warning("Race import rejected: a batch is already running")
        return HTMLResponse(
            '<div class="nb-alert nb-alert--error">'
            'Another import is still running. Try again when it finishes.'
            '</div>',
            status_code=409,
        )

    return HTMLResponse(_outcome_html(outcome) + _parse_errors_html(result))


@router.get("/{race_id}")
async def race_edit(request: Request, race_id: str):
    race = db.get_race(race_id)
    if not race:
        return not_found("Race")
    return templates.TemplateResponse(request, "admin/race_form.html", {
        "active_page": "races",
        "race": race,
        "race_types": RACE_TYPES,
    })


@router.post("/{race_id}")
async def race_update(
    request: Request,
    race_id: str,
    name: str = Form(""),
    race_date: str = Form(""),
    race_type: str = Form(""),
    region: str = Form(""),
    link: str = Form(""),
):
    if not db.get_race(race_id):
        return not_found("Race")

    errors = validate_race({"name": name, "race_date": race_date, "link": link})
    if errors:
        return validation_failure(errors)

    try:
        update_race(race_id, build_payload(name, race_date, race_type, region, link))
    except APIError as e:
        return write_failure(request, "UPDATE", "race", e)

    return HTMLResponse(
        '<div class="nb-alert nb-alert--success">'
        'Race saved. <a href="/admin/races/">Back to races</a>'
        '</div>'
    )


@router.post("/{race_id}/delete")
async def race_delete(request: Request, race_id: str):
    try:
        removed = delete_race(race_id)
    except APIError as e:
        return write_failure(request, "DELETE", "race", e)
    if not removed:
        return not_found("Race")
    return HTMLResponse("")
