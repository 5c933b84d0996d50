"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schoolbase.core.config import get_settings
from schoolbase.core.exceptions import SchoolBaseError
from schoolbase.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from schoolbase.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting SchoolBase",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )
    if settings.uses_insecure_secret:
        logger.warning(
            "Session tokens are signed with the development secret; "
            "set SCHOOLBASE_SESSION_SECRET before deploying"
        )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down SchoolBase")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Multi-school management backend",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity.
        """
        return {
            "status": "healthy",
            "service": "SchoolBase",
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        if await get_db_manager().check_connection():
            return {
                "status": "ready",
                "service": "SchoolBase",
                "version": get_settings().app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": "SchoolBase",
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from schoolbase.infrastructure.api.routes import (
        admin_router,
        auth_router,
        student_router,
        superadmin_router,
        teacher_router,
    )

    settings = get_settings()
    prefix = settings.api_prefix

    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(superadmin_router, prefix=f"{prefix}/superadmin", tags=["superadmin"])
    app.include_router(admin_router, prefix=f"{prefix}/admin", tags=["admin"])
    app.include_router(teacher_router, prefix=f"{prefix}/teacher", tags=["teacher"])
    app.include_router(student_router, prefix=f"{prefix}/student", tags=["student"])

    @app.get("/", tags=["root"])
    async def root():
        return {"message": f"{settings.app_name} API is running"}

    @app.get(prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
        }


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Application errors become ``{"error": message, ...}`` with the status
    code the error class declares. Anything else is logged and returned
    as a generic 500.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(SchoolBaseError)
    async def schoolbase_exception_handler(request: Request, exc: SchoolBaseError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=exc.message,
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, **exc.extra()},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report the first malformed body or query field as a 400."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        # loc is ("body" | "query" | "path", field, ...)
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        logger.info(
            "Request validation failed",
            path=request.url.path,
            method=request.method,
            field=field or None,
            error_count=len(errors),
        )
        content = {"error": first.get("msg", "Invalid request")}
        if field:
            content["field"] = field
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request and propagate a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
