"""Landing page, privacy page, and the waitlist form."""

import html
import logging
from typing import Optional

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from nabajk.config import CONTACT_EMAIL, INSTAGRAM_URL, WEB_TEMPLATES_DIR
from nabajk.i18n import LOCALES, resolve_locale, t
from nabajk.routers.auth import RateLimiter
from nabajk.services.waitlist import add_to_waitlist

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))

LANG_COOKIE = "lang"
_LANG_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

waitlist_limiter = RateLimiter(5, detail="Too many signups")

_RESULT_KEYS = {
    "ok": "waitlistSuccess",
    "invalid": "waitlistErrorInvalid",
    "duplicate": "waitlistErrorDuplicate",
    "error": "waitlistErrorGeneric",
}


def _page_locale(request: Request, lang: Optional[str]) -> str:
    """?lang= wins, then the cookie, then the default."""
    return resolve_locale(lang or request.cookies.get(LANG_COOKIE))


def _render(request: Request, template: str, lang: Optional[str]):
    locale = _page_locale(request, lang)
    response = templates.TemplateResponse(request, template, {
        "locale": locale,
        "locales": LOCALES,
        "t": lambda key: t(locale, key),
        "contact_email": CONTACT_EMAIL,
        "instagram_url": INSTAGRAM_URL,
    })
    if lang and lang in LOCALES:
        response.set_cookie(LANG_COOKIE, locale, max_age=_LANG_COOKIE_MAX_AGE, samesite="lax")
    return response


@router.get("/")
async def landing(request: Request, lang: Optional[str] = Query(None)):
    return _render(request, "landing.html", lang)


@router.get("/privacy")
async def privacy(request: Request, lang: Optional[str] = Query(None)):
    return _render(request, "privacy.html", lang)


@router.post("/waitlist")
async def waitlist_signup(
    request: Request,
    email: str = Form(""),
    locale: str = Form(""),
    website: str = Form(""),
):
    waitlist_limiter.check(request)
    locale = resolve_locale(locale)

    # Honeypot: bots fill every field. Look successful, store nothing.
    if website.strip():
        logger.info("Waitlist honeypot triggered")
        result = "ok"
    else:
        result = add_to_waitlist(email, locale)

    kind = "success" if result == "ok" else "error"
    status_code = {"ok": 200, "invalid": 400, "duplicate": 409}.get(result, 502)
    return HTMLResponse(
        f'<div class="nb-alert nb-alert--{kind}">{html.escape(t(locale, _RESULT_KEYS[result]))}</div>',
        status_code=status_code,
    )
