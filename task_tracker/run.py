#!/usr/bin/env python3
"""
Entry point for running the Task Tracker API.
Supports development and production modes.
"""

import logging
import sys

from .logging_utils import configure_logging
from .settings import get_settings

logger = logging.getLogger(__name__)

APP_PATH = "task_tracker.main:app"


def log_startup(port: int, workers: int) -> None:
    """Log a single startup line for process managers."""
    settings = get_settings()
    logger.info(
        "Starting on 0.0.0.0:%s (STORAGE=%s, WORKERS=%s)",
        port,
        "postgres" if settings.database_url else "memory",
        workers,
    )


def run_development():
    """Development mode: single process with auto-reload."""
    import uvicorn

    settings = get_settings()
    log_startup(settings.port, 1)
    uvicorn.run(
        APP_PATH,
        host="0.0.0.0",
        port=settings.port,
        reload=True,
        log_level="debug",
    )


def run_production():
    """Production mode."""
    import uvicorn

    settings = get_settings()
    log_startup(settings.port, settings.workers)
    uvicorn.run(
        APP_PATH,
        host="0.0.0.0",
        port=settings.port,
        workers=settings.workers,
        log_level="info",
        access_log=True,
    )


def show_help():
    """Show usage."""
    print("""
Task Tracker API - Launch Utility

Usage:
  task-tracker [command]

Commands:
  dev        - Run in development mode (auto-reload)
  prod       - Run in production mode
  help       - Show this help message
    """.strip())


def main(argv=None):
    configure_logging(get_settings().log_level)
    argv = sys.argv[1:] if argv is None else argv
    mode = argv[0].lower() if argv else "prod"

    try:
        if mode == "dev":
            run_development()
        elif mode == "prod":
            run_production()
        elif mode in ["help", "-h", "--help"]:
            show_help()
        else:
            print(f"Unknown mode: {mode}")
            show_help()
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Shutdown requested...")
        sys.exit(0)


if __name__ == "__main__":
    main()
