"""
FastAPI Application Entry Point

La Bella Restaurant Backend.

Endpoints:
    - /api/*: menu, orders, reservations, feedback, payments, admin views
    - GET /health: System health check
    - everything else: static frontend files from STATIC_DIR

Unknown /api paths always answer with a JSON 404 and unhandled errors
with a JSON 500, never an HTML page.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import router as api_router
from app.bootstrap import init_database
from app.core.config import Settings, get_settings, setup_logging
from app.database import get_db, reset_engine
from app.schemas import ErrorResponse, HealthResponse
from app.services.notifications import (
    get_email_sender,
    get_sms_sender,
    init_notification_services,
    reset_notification_services,
)

logger = logging.getLogger(__name__)

API_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings = get_settings()

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if settings.init_db_on_startup:
        await init_database()
        logger.info("✅ Database initialized")

    init_notification_services(settings)
    logger.info(f"✅ SMS Service: {get_sms_sender().provider_name}")
    logger.info(f"✅ Email Service: {get_email_sender().provider_name}")

    missing = settings.validate_notification_config()
    if missing:
        logger.warning(f"⚠️ Notifications will only be logged, missing: {missing}")

    logger.info("=" * 60)
    logger.info(f"✅ Application ready on port {settings.port}")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    reset_notification_services()
    await reset_engine()
    logger.info("✅ Cleanup complete")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def api_not_found(request: Request, path: str) -> JSONResponse:
    """Any /api path no router matched."""
    logger.info(f"No API route for {request.method} {request.url.path}")
    return JSONResponse(status_code=404, content={"error": "API endpoint not found"})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Bodies that still cannot be read once null and blank values have
    fallen back to their defaults (e.g. ``"rating": "excellent"``).

    These take the same 500 path as any other failed request.
    """
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"][1:]) or "body"
        problems.append(f"{field}: {error['msg']}")
    message = "; ".join(problems) or "Invalid request body"
    logger.warning(f"Unreadable body for {request.method} {request.url.path}: {message}")

    return JSONResponse(status_code=500, content={"error": message})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled server error: {exc}")

    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "Internal server error"},
    )


# =============================================================================
# HEALTH
# =============================================================================

async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Verify the database is reachable and report the active senders."""
    db_status = "healthy"
    try:
        await db.execute(select(1))
    except Exception as e:
        db_status = f"unhealthy: {e}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        sms_service=get_sms_sender().provider_name,
        email_service=get_email_sender().provider_name,
        timestamp=datetime.now(),
    )


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Route order matters: the API router first, then the /api catch-all,
    then the static mount at "/" which takes everything left.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Menu, orders, reservations, payments and feedback for La Bella.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.add_api_route(
        "/health",
        health_check,
        methods=["GET"],
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    app.add_api_route(
        "/api/{path:path}",
        api_not_found,
        methods=API_METHODS,
        include_in_schema=False,
        responses={404: {"model": ErrorResponse}},
    )

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving static files from {static_dir.resolve()}")
    else:
        logger.info(f"Static directory {static_dir} not found, frontend not served")

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


setup_logging()
app = create_app()


def run() -> None:
    """Run the API with uvicorn."""
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.api_host, port=settings.port)


if __name__ == "__main__":
    run()
