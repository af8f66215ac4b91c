"""
DevCamper API - Server Entry Point
==================================

Usage:
    python -m devcamper        (or the `devcamper-api` console script)

Binds to BACKEND_HOST:BACKEND_PORT from the settings.
"""

import uvicorn

from devcamper.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "devcamper.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
