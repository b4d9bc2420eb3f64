"""
Attraction Sync API

FastAPI service that accepts crowd-submitted attractions into a local
cache and answers duplicate-name lookups. Sync runs are triggered by
operator commands (see attractions.commands and scripts/sync.py).

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI

from attractions.config import Config

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}")

from attractions.commands import listen_for_commands
from attractions.routes import attractions_router
from attractions.services.attraction_sync import AttractionSync
from attractions.services.cache_repository import CacheRepository


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    cache = CacheRepository(Config.cache_db_path())
    app.state.cache = cache

    if Config.command_console_enabled():
        sync = AttractionSync(cache)
        threading.Thread(
            target=listen_for_commands,
            args=(sync,),
            name="command-console",
            daemon=True,
        ).start()
        logger.info("Command console listening on stdin")

    logger.info("Service ready to handle requests")
    yield
    cache.close()


app = FastAPI(
    title="Attraction Sync API",
    description="Collect attraction submissions and check for duplicates",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(attractions_router, tags=["attractions"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Attraction Sync API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint for probes."""
    return {"status": "healthy"}
