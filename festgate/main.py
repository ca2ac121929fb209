"""Main FastAPI application."""
from fastapi import FastAPI, Request, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from festgate.api.v1.router import api_router
from festgate.api.deps import get_db
from festgate.core.config import settings
from festgate.core.exceptions import FestgateError, PersistenceUnavailable
from festgate.core.rate_limit import limiter
from festgate.core.logging_config import setup_logging, get_logger
from festgate.core.cache import global_cache
from festgate.middleware import LoggingMiddleware

# Seconds clients are told to wait before retrying after a storage outage
RETRY_AFTER_SECONDS = 2

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION
)

# Add rate limiter to app state
app.state.limiter = limiter

# Add rate limit exceeded exception handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(FestgateError)
async def festgate_error_handler(request: Request, exc: FestgateError) -> JSONResponse:
    """Map domain errors to {"success": false, "error": ...} with their status code."""
    headers = None
    if isinstance(exc, PersistenceUnavailable):
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    else:
        logger.info("request_rejected", status_code=exc.status_code, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Authentication and routing errors use the same envelope as domain errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the error envelope with the first problem spelled out."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": f"{location}: {message}" if location else message,
            "details": jsonable_encoder(errors),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last line of defence for storage errors that escaped the service layer."""
    logger.error("database_error", error=str(exc), exception_type=type(exc).__name__)
    return JSONResponse(
        status_code=503,
        content={"success": False, "error": "Storage is temporarily unavailable, please retry"},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


# Add logging middleware (must be added before other middleware for proper request tracking)
app.add_middleware(LoggingMiddleware)

# Add API versioning middleware
@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

# CORS middleware - configured for cookie-based auth
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,  # Configured via environment
    allow_credentials=True,  # Required for cookies
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-API-Version", "Content-Disposition"],
)

# Include API router
app.include_router(api_router)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - environment: Current environment setting
        - cache: Dashboard stats cache statistics (size, hits, misses, hit rate)
        - database: Database connection status

    Returns 503 if database is unreachable, so load balancers stop routing
    scanner traffic to this instance.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION,
        "cache": global_cache.get_stats(),
        "database": {"status": "connected"},
    }

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        return JSONResponse(status_code=503, content=health_status)

    return health_status
