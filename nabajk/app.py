"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from nabajk import supabase_client as db
from nabajk.config import STATIC_DIR
from nabajk.routers import (
    announcements, auth, dashboard, group_rides, landing, public_api, races, routes,
)
from nabajk.routers.auth import AdminLoginRequired

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if db.is_configured():
        logger.info("Supabase configured, back office ready")
    else:
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_KEY not set: "
                       "waitlist runs in dev mode and admin login is unavailable")
    yield


async def _login_redirect(request: Request, exc: AdminLoginRequired):
    # HTMX requests follow HX-Redirect instead of swapping the login page in
    if request.headers.get("HX-Request"):
        return Response(status_code=204, headers={"HX-Redirect": "/admin/login"})
    return RedirectResponse("/admin/login", status_code=303)


def create_app() -> FastAPI:
    app = FastAPI(
        title="NaBajk",
        description=(
            "NaBajk landing page, admin back office, and the read-only "
            "feeds the mobile app uses at /api/v1."
        ),
        version="1.0.0",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    # Static files
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.add_exception_handler(AdminLoginRequired, _login_redirect)

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    # Landing page and back office, hidden from API docs
    for r in [landing, auth, dashboard, announcements, routes, group_rides, races]:
        app.include_router(r.router, include_in_schema=False)

    # App feeds, public and included in API docs
    app.include_router(public_api.router)

    return app
