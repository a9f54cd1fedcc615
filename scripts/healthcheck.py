"""
Container health check: the HTTP backend by default, or the database
with --database.
"""

from __future__ import annotations

import argparse
import os
from urllib.error import URLError
from urllib.request import urlopen


def _check_http() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")
    url = f"http://127.0.0.1:{port}{path}"

    try:
        with urlopen(url, timeout=2) as response:
            return 0 if 200 <= response.status < 400 else 1
    except (URLError, TimeoutError, ValueError):
        return 1


def _check_database() -> int:
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import session_scope

    try:
        with session_scope() as db:
            db.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError):
        return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Health check for the API or the database.")
    parser.add_argument("--database", action="store_true", help="Check database connectivity instead of HTTP.")
    args = parser.parse_args()
    return _check_database() if args.database else _check_http()


if __name__ == "__main__":
    raise SystemExit(main())
