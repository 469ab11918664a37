"""
FastAPI application for Court Scheduler.

This is the main entry point for the HTTP API, providing:
- Public availability, slot and booking endpoints for the player app
- Owner-scoped booking, blackout and catalog endpoints
- Health and status endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from court_scheduler import __version__
from court_scheduler.api.models import HealthResponse
from court_scheduler.api.response_builder import build_error_response
from court_scheduler.api.dependencies import get_db_session
from court_scheduler.api.middleware import RequestLoggingMiddleware
from court_scheduler.api.booking_routes import router as booking_router
from court_scheduler.api.blackout_routes import router as blackout_router
from court_scheduler.api.catalog_routes import router as catalog_router
from court_scheduler.api.public_routes import router as public_router
from court_scheduler.config import get_settings
from court_scheduler.database import init_db, check_connection
from court_scheduler.exceptions import (
    CourtSchedulerError,
    ValidationError,
    NotFoundError,
    ForbiddenError,
    SchedulingConflict,
    InvalidStateError,
    PersistenceError,
)

logger = logging.getLogger(__name__)

# HTTP status for each domain error
ERROR_STATUS_CODES = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    SchedulingConflict: 409,
    InvalidStateError: 409,
    PersistenceError: 503,
}


def configure_logging() -> None:
    """Configure root logging from settings."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging()
    logger.info("Starting Court Scheduler API")
    init_db()
    logger.info("Court Scheduler API started")

    yield

    # Shutdown
    logger.info("Shutting down Court Scheduler API")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Court Scheduler API",
    description="""
# Court Scheduler API

Availability and booking engine for sports courts.

## Core Workflows

### Availability
- **GET /public/courts/{court_id}/availability** - Is a window free?
- **GET /public/courts/{court_id}/slots** - Calendar grid for a day

### Bookings
1. **POST /bookings** (owner) or **POST /public/bookings** (app)
2. The court is checked for overlapping bookings and blackouts
3. **POST /bookings/{booking_id}/confirm**, **/complete** or **/cancel**

Windows are half-open: a booking ending at 15:00 and one starting at 15:00
do not collide. All times are naive local times.

## Error Handling

Errors return `{error_type, message, retryable, details}`.

- **400** - Invalid input (e.g. end not after start)
- **401** - Missing or malformed X-Owner-ID
- **403** - Record owned by another owner
- **404** - Record not found
- **409** - Scheduling conflict or invalid status transition
- **422** - Request format validation error
- **503** - Database unavailable (retryable)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(public_router)
app.include_router(booking_router)
app.include_router(blackout_router)
app.include_router(catalog_router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(CourtSchedulerError)
async def scheduler_exception_handler(request, exc: CourtSchedulerError):
    """Translate domain errors to their HTTP status."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    if status_code >= 500:
        logger.error(f"{exc.error_type}: {exc.message}", exc_info=exc.original_error)
    else:
        logger.info(f"{exc.error_type}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=build_error_response(
            error_type=exc.error_type,
            message=exc.message,
            details=exc.details or None,
            retryable=exc.retryable,
        ),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_response(
            error_type="http_error",
            message=exc.detail,
            retryable=exc.status_code >= 500,
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=build_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            retryable=True,
        ),
    )


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
def health_check(db: Session = Depends(get_db_session)) -> HealthResponse:
    """
    Check API health status.

    Returns:
        Health status including database connectivity
    """
    database_connected = check_connection(db)

    return HealthResponse(
        status="healthy" if database_connected else "unhealthy",
        version=__version__,
        database_connected=database_connected,
    )


# =============================================================================
# Run with Uvicorn
# =============================================================================


def run_server(host: str | None = None, port: int | None = None, reload: bool | None = None):
    """Run the API server with Uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "court_scheduler.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.api_reload if reload is None else reload,
    )


if __name__ == "__main__":
    run_server()
