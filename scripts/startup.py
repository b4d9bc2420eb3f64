#!/usr/bin/env python3
"""
Container startup script.

1. Run Alembic migrations on the cache database (upgrade head)
2. exec uvicorn to replace this process

Set COMMAND_CONSOLE=true to have the server also read merge/initialize
commands from stdin.
"""

import logging
import os
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - startup - %(levelname)s - %(message)s",
)
logger = logging.getLogger("startup")

# Resolve paths relative to the repository root
PROJECT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_DIR))

from attractions.config import Config
from attractions.db import ensure_schema


def run_migrations() -> bool:
    """Run Alembic migrations (upgrade head).

    Returns True on success, False on failure.
    """
    db_path = Config.cache_db_path()

    if not Path(db_path).exists():
        logger.info(f"No cache at {db_path}, migrations will create schema")

    logger.info("Running alembic upgrade head...")
    try:
        ensure_schema(db_path)
    except Exception as e:
        logger.error(f"Migration error: {e}")
        return False
    logger.info("Migrations complete")
    return True


def exec_uvicorn():
    """Replace this process with uvicorn."""
    port = os.getenv("PORT", "8080")
    log_level = Config.log_level().lower()
    logger.info(f"Starting uvicorn on port {port} (log_level={log_level})")

    os.chdir(PROJECT_DIR)
    os.execvp(
        sys.executable,
        [
            sys.executable,
            "-m",
            "uvicorn",
            "main:app",
            "--host",
            "0.0.0.0",
            "--port",
            port,
            "--log-level",
            log_level,
        ],
    )


def main():
    logger.info("=== Attraction Sync API Startup ===")

    if not run_migrations():
        logger.error("Cache migration failed, exiting")
        sys.exit(1)

    # Replaces this process via execvp
    exec_uvicorn()


if __name__ == "__main__":
    main()
