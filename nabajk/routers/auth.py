"""Admin login/logout and the ``require_admin`` gate used by every admin page."""

import html
import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from postgrest.exceptions import APIError

from nabajk.config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, WEB_TEMPLATES_DIR
from nabajk.services import auth

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))

_SESSION_MAX_AGE = 60 * 60  # matches the Supabase access token lifetime


class AdminLoginRequired(Exception):
    """No valid admin session on the request."""


class RateLimiter:
    """In-memory sliding window per client IP: {ip: [timestamp, ...]}."""

    def __init__(self, limit: int, window: float = 60, detail: str = "Rate limit exceeded"):
        self.limit = limit
        self.window = window
        self.detail = detail
        self._buckets: dict[str, list[float]] = defaultdict(list)

    def check(self, request: Request) -> None:
        """Raise 429 if the IP is over the limit, otherwise record the hit."""
        ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        cutoff = now - self.window
        self._buckets[ip] = bucket = [t for t in self._buckets[ip] if t > cutoff]
        if len(bucket) >= self.limit:
            raise HTTPException(status_code=429, detail=self.detail)
        bucket.append(now)

    def clear(self) -> None:
        self._buckets.clear()


login_limiter = RateLimiter(10, detail="Too many login attempts")


def session_token(request: Request) -> str:
    return request.cookies.get(SESSION_COOKIE_NAME, "")


def require_admin(request: Request) -> dict:
    """FastAPI dependency: the signed-in admin, or a redirect to the login page."""
    admin = auth.get_admin(session_token(request))
    if admin is None:
        raise AdminLoginRequired()
    return admin


def write_failure(request: Request, action: str, entity: str, error: APIError) -> HTMLResponse:
    """Log a failed write with auth diagnostics and render it as an alert."""
    diag = auth.auth_diagnostics(session_token(request))
    logger.error("[%s] %s write failed: %s (code %s, hint %s) | %s",
                 action, entity, error.message, error.code, error.hint,
                 auth.format_diagnostics(diag))
    message = error.message or f"Failed to save {entity}"
    return HTMLResponse(
        '<div class="nb-alert nb-alert--error" style="white-space:pre-wrap">'
        f'{html.escape(message)} (Code: {html.escape(str(error.code or "unknown"))})\n\n'
        f'Diagnostics: {html.escape(auth.format_diagnostics(diag))}'
        '</div>',
        status_code=502,
    )


def validation_failure(errors: dict) -> HTMLResponse:
    items = "".join(f"<li>{html.escape(msg)}</li>" for msg in errors.values())
    return HTMLResponse(
        f'<div class="nb-alert nb-alert--error"><ul>{items}</ul></div>',
        status_code=400,
    )


def not_found(entity: str) -> HTMLResponse:
    return HTMLResponse(
        f'<div class="nb-alert nb-alert--error">{html.escape(entity)} not found.</div>',
        status_code=404,
    )


@router.get("/login")
async def login_page(request: Request):
    return templates.TemplateResponse(request, "admin/login.html", {
        "error": None,
    })


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
):
    login_limiter.check(request)
    try:
        session = auth.sign_in(email, password)
    except RuntimeError as e:
        logger.error("Login unavailable: %s", e)
        session = None

    if session is None:
        return templates.TemplateResponse(request, "admin/login.html", {
            "error": "Invalid email or password, or this account is not an admin.",
            "email": email,
        }, status_code=401)

    response = RedirectResponse("/admin", status_code=303)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session["access_token"],
        max_age=_SESSION_MAX_AGE,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout(request: Request):
    auth.sign_out(session_token(request))
    response = RedirectResponse("/admin/login", status_code=303)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response
