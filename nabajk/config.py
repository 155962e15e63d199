"""NaBajk back office configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

REPO_ROOT = Path(__file__).resolve().parent.parent

# Jinja2 templates for the landing page and admin UI
WEB_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# Supabase
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "") or SUPABASE_SERVICE_KEY

# Admin session cookie (holds the Supabase access token)
SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "nabajk_admin")
SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

# Landing page
DEFAULT_LOCALE = os.environ.get("DEFAULT_LOCALE", "sl")
CONTACT_EMAIL = os.environ.get("CONTACT_EMAIL", "nabajk.si@gmail.com")
INSTAGRAM_URL = os.environ.get("INSTAGRAM_URL", "https://www.instagram.com/nabajk.si/")

# GPX uploads
GPX_MAX_BYTES = int(os.environ.get("GPX_MAX_BYTES", str(10 * 1024 * 1024)))

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
