#!/usr/bin/env python3
"""NaBajk — landing page and admin back office.

Launch: python3 serve.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import logging

import uvicorn

from nabajk.config import HOST, LOG_LEVEL, PORT
from nabajk import supabase_client as db


def main():
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("  NaBajk — back office")
    print("=" * 60)

    if not db.is_configured():
        print("\n  WARNING: SUPABASE_URL not set. Set environment variables:")
        print("    SUPABASE_URL, SUPABASE_SERVICE_KEY, SUPABASE_ANON_KEY")
        print("  Continuing anyway for local development...\n")

    url = f"http://{HOST}:{PORT}"
    print(f"\n  Landing: {url}/")
    print(f"  Admin:   {url}/admin")
    print("  Press Ctrl+C to stop\n")

    from nabajk.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
