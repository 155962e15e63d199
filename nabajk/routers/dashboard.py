"""Dashboard route — GET /admin"""

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates

from nabajk.config import WEB_TEMPLATES_DIR
from nabajk.routers.auth import require_admin
from nabajk.services.stats import dashboard_stats, upcoming_group_rides, upcoming_races

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@router.get("/admin")
async def dashboard(request: Request, admin: dict = Depends(require_admin)):
    return templates.TemplateResponse(request, "admin/dashboard.html", {
        "active_page": "dashboard",
        "admin": admin,
        "stats": dashboard_stats(),
        "upcoming_races": upcoming_races(),
        "upcoming_rides": upcoming_group_rides(),
    })
