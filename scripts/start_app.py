#!/usr/bin/env python3
"""Serve the API under uvicorn, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from claim.config import Settings
from claim.util.logging import setup_logging
from claim.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Logfire first so a failing import of the app is still reported
    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info(
            "Starting identity API",
            environment=settings.environment,
            git_sha=settings.git_sha,
        )
        uvicorn.run(
            "claim.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
