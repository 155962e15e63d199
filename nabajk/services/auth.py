"""Admin authentication — Supabase Auth sessions plus the ``admins`` table.

A user may sign in with Supabase Auth, but only users listed in ``admins``
get into the back office.
"""

import logging
from datetime import datetime, timezone

import httpx
from postgrest.exceptions import APIError
from supabase import AuthError

from nabajk import supabase_client as db

logger = logging.getLogger(__name__)


def is_admin(user_id: str) -> bool:
    """True when the user has a row in ``admins``."""
    if not user_id:
        return False
    return db.get_admin_by_user_id(user_id) is not None


def sign_in(email: str, password: str) -> dict | None:
    """Password sign-in. Returns session info for admins, None otherwise."""
    try:
        response = db.new_client().auth.sign_in_with_password(
            {"email": email.strip().lower(), "password": password}
        )
    except AuthError as e:
        logger.info("Sign-in rejected for %s: %s", email, e)
        return None
    except httpx.HTTPError as e:
        logger.warning("Sign-in for %s failed: %s", email, e)
        return None

    session = getattr(response, "session", None)
    user = getattr(response, "user", None)
    if session is None or user is None:
        logger.info("Sign-in for %s returned no session", email)
        return None

    try:
        admin = is_admin(user.id)
    except APIError as e:
        logger.warning("Admin check for %s failed: %s", email, e.message)
        return None
    if not admin:
        logger.warning("Non-admin user %s (%s) tried to sign in", user.id, email)
        return None

    logger.info("Admin %s signed in", email)
    return {
        "access_token": session.access_token,
        "refresh_token": getattr(session, "refresh_token", None),
        "user_id": user.id,
        "email": user.email,
    }


def _resolve_user(access_token: str):
    response = db.get_client().auth.get_user(access_token)
    return getattr(response, "user", None) if response else None


def get_admin(access_token: str) -> dict | None:
    """Resolve an access token to an admin, or None if it is not one."""
    if not access_token:
        return None
    try:
        user = _resolve_user(access_token)
        if user is None or not is_admin(user.id):
            return None
    except AuthError as e:
        logger.info("Access token rejected: %s", e)
        return None
    except (RuntimeError, APIError, httpx.HTTPError) as e:
        # Backend unavailable: treat as signed out so the gate redirects
        logger.warning("Admin lookup failed: %s", e)
        return None
    return {"user_id": user.id, "email": user.email}


def sign_out(access_token: str) -> None:
    """Revoke the session server-side. The cookie is cleared by the caller."""
    if not access_token:
        return
    try:
        db.get_client().auth.admin.sign_out(access_token)
    except AuthError as e:
        logger.info("Sign-out for expired session: %s", e)
    except (RuntimeError, httpx.HTTPError) as e:
        logger.warning("Sign-out failed: %s", e)


def auth_diagnostics(access_token: str | None) -> dict:
    """Session and admin status, attached to write-failure messages."""
    timestamp = datetime.now(timezone.utc).isoformat()
    diag = {
        "has_session": False,
        "user_id": None,
        "user_email": None,
        "is_admin": False,
        "session_error": None,
        "admin_check_error": None,
        "timestamp": timestamp,
    }

    if not access_token:
        diag["session_error"] = "No active session"
        return diag

    try:
        user = _resolve_user(access_token)
    except (AuthError, httpx.HTTPError) as e:
        diag["session_error"] = str(e) or "Invalid session"
        return diag
    if user is None:
        diag["session_error"] = "No active session"
        return diag

    diag["has_session"] = True
    diag["user_id"] = user.id
    diag["user_email"] = user.email
    try:
        diag["is_admin"] = is_admin(user.id)
    except APIError as e:
        diag["admin_check_error"] = e.message
    return diag


def format_diagnostics(diag: dict) -> str:
    """One-line summary: ``User: ... | Admin: yes | Session: valid``."""
    parts = [
        f"User: {diag.get('user_id') or 'none'}",
        f"Admin: {'yes' if diag.get('is_admin') else 'no'}",
        f"Session: {'valid' if diag.get('has_session') else 'missing'}",
    ]
    if diag.get("session_error"):
        parts.append(f"Session error: {diag['session_error']}")
    if diag.get("admin_check_error"):
        parts.append(f"Admin check error: {diag['admin_check_error']}")
    return " | ".join(parts)
