"""Futurely API - Main application entry point."""

from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import all models to register them with SQLAlchemy
from futurely.auth import models as auth_models  # noqa: F401
from futurely.auth.router import router as auth_router
from futurely.core.config import settings
from futurely.dispatch import models as dispatch_models  # noqa: F401
from futurely.dispatch.router import router as dispatch_router
from futurely.dispatch.scheduler import shutdown_scheduler, start_scheduler
from futurely.letters import models as letters_models  # noqa: F401
from futurely.letters.router import router as letters_router
from futurely.waitlist import models as waitlist_models  # noqa: F401
from futurely.waitlist.router import router as waitlist_router

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    log.info("Starting Futurely API", version=settings.version, environment=settings.environment)

    # Start the scheduler for the daily delivery run
    if settings.scheduler_enabled:
        start_scheduler()
    else:
        log.info("Scheduler disabled")

    yield

    await shutdown_scheduler()
    log.info("Shutting down Futurely API")


app = FastAPI(
    title="Futurely API",
    description="Write letters to your future self, sealed until the day they arrive",
    version=settings.version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# Include routers
app.include_router(auth_router)
app.include_router(letters_router)
app.include_router(dispatch_router)
app.include_router(waitlist_router)


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.version,
        "environment": settings.environment,
    }
