"""WSGI entry point for the Healthy Habits backend.

This module provides a minimal CLI entrypoint used both in development and
production (``gunicorn healthy_app:app``). Configuration comes from the
environment or a ``.env`` file.
"""
from __future__ import annotations

import logging
import os

from app import create_app


def _env_flag_true(name: str) -> bool:
    v = os.getenv(name)
    return bool(v and v.lower() in ("1", "true", "yes", "on"))


app = create_app()


def main() -> int:
    host = os.getenv("HEALTHY_HOST", "0.0.0.0")
    port = int(os.getenv("HEALTHY_PORT", "8000"))
    debug = _env_flag_true("HEALTHY_DEBUG")

    logging.info("Starting server on %s:%s", host, port)

    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
        logging.info("Server stopped.")
        return 0
    except KeyboardInterrupt:
        logging.info("Server stopped by user.")
        return 0
    except Exception as exc:  # pragma: no cover - top-level runtime errors
        logging.exception("ERROR: Failed to start server: %s", exc)
        return 1


if __name__ == "__main__":
    # Mirrors the `healthy-backend` console script.
    raise SystemExit(main())
