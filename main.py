#!/usr/bin/env python3
"""
SecureSphere -- credential-based authentication API server.

Usage:
  python main.py
  python main.py --port 8000
  python main.py --host 0.0.0.0 --reload

Environment variables (see core/config.py for the full list):
  ENVIRONMENT         development (default), test, or production
  SECRET_KEY          JWT signing key, >= 32 chars; required in production
  DATABASE_URL        SQLAlchemy URL of the credential store
  COOKIE_EXPIRE_DAYS  session cookie lifetime in days (default 7)
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="securesphere",
        description="Run the SecureSphere authentication API.",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on (default: {settings.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    args = parser.parse_args()

    if args.reload and settings.is_production:
        parser.error("--reload is not allowed when ENVIRONMENT=production")

    print(f"\nSecureSphere running in {settings.environment} mode")
    print(f"  API: http://{args.host}:{args.port}/api/auth\n")
    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
