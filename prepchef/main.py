"""
FastAPI application entry point for the PrepChef data layer.

The lifespan creates the single DatabaseService for the process and calls
``initialize()`` on it exactly once. Nothing is initialized at import time.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from prepchef.config import settings
from prepchef.routes.health import router as health_router
from prepchef.services.database import DatabaseService
from prepchef.utils.logging import configure_logging

# Configure logging
configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create and initialize the DatabaseService (unless one was injected)."""
    if getattr(app.state, "db", None) is None:
        app.state.db = await DatabaseService.create(settings)

    missing = settings.missing()
    if missing:
        logger.warning(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file."
        )

    try:
        await app.state.db.initialize()
    except Exception as e:
        # The session manager stays uninitialized and retries on first use
        logger.error(f"DatabaseService initialization failed: {e}", exc_info=True)

    yield


# Create FastAPI app
app = FastAPI(
    title="PrepChef Data API",
    description="Operational endpoints for the PrepChef Supabase data layer",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)

logger.info("FastAPI app initialized successfully")
