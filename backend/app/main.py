"""
Expense Tracker FastAPI application.
Main entry point for the backend API.
"""
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from backend.app.config import Settings, get_settings, set_test_mode, is_test_mode

# Check for --test flag in command line arguments
# This must be done before any imports that might use settings
if "--test" in sys.argv:
    set_test_mode(True)
    print("[Expense Tracker] Test mode enabled (--test flag detected)")
    sys.argv.remove("--test")  # Remove flag so uvicorn doesn't complain

from backend.app.api.v1.rate_limiter import FixedWindowRateLimiter  # noqa: E402
from backend.app.api.v1.responses import (  # noqa: E402
    APIError,
    api_error_handler,
    request_validation_handler,
    )
from backend.app.api.v1.router import auth_router, router as api_v1_router, tx_router  # noqa: E402
from backend.app.db.session import init_database  # noqa: E402
from backend.app.logging_config import (  # noqa: E402
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    )

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan context manager.
    Handles startup and shutdown events.
    """
    settings = app.state.settings
    logger.info(
        "Starting Expense Tracker",
        version=settings.VERSION,
        database_url=settings.DATABASE_URL.split("///")[-1],  # Hide full path in logs
        test_mode=is_test_mode(),
        )

    # Create missing tables
    init_database()

    yield
    # Shutdown
    logger.info("Shutting down Expense Tracker")


async def log_requests(request: Request, call_next):
    """Log status and duration of every request under its request_id/method/path context."""
    request_id = bind_request_context(request.method, request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "HTTP request",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        return response
    finally:
        clear_request_context()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Rate limiter state lives on the app (app.state.rate_limiters), so every
    app instance starts with fresh counters.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_TO_FILE)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        lifespan=lifespan,
        )
    app.state.settings = settings

    general_limiter = FixedWindowRateLimiter(settings.RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS)
    auth_limiter = FixedWindowRateLimiter(settings.AUTH_RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS)
    app.state.rate_limiters = {"general": general_limiter, "auth": auth_limiter}

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        )
    app.middleware("http")(log_requests)

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Mount API v1 routers
    prefix = settings.API_V1_PREFIX
    app.include_router(auth_router, prefix=prefix, dependencies=[Depends(general_limiter), Depends(auth_limiter)])
    app.include_router(tx_router, prefix=prefix, dependencies=[Depends(general_limiter)])
    app.include_router(api_v1_router, prefix=prefix, dependencies=[Depends(general_limiter)])

    @app.get("/")
    async def root():
        """
        Root endpoint.
        Provides basic API information.
        """
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": f"{settings.API_V1_PREFIX}/docs",
            }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.app.main:app", host="0.0.0.0", port=get_settings().PORT)
