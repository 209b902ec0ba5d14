"""
FastAPI application entry point.

Uses structured logging from caching_api.logging. The Redis connection is
owned by the app: created here, initialized on startup, closed on shutdown.
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caching_api.cache import RedisConnection
from caching_api.config import Settings, get_settings
from caching_api.db import db
from caching_api.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import drivers as drivers_router

logger = get_logger("api")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level="DEBUG" if settings.debug else settings.log_level)

    # API version prefix
    api_version = "v1"
    api_prefix = f"{settings.api_prefix}/{api_version}"

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.redis = RedisConnection(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    )

    # Structured request logging, inside the request ID middleware so the ID is bound first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        logger.info("app_startup", app_name=settings.app_name)

        db.initialize(settings.database_url)
        db.create_all_tables()

        if app.state.redis.initialize():
            logger.info("cache_initialized", redis_host=settings.redis_host)
        else:
            logger.warning("cache_unavailable", operation="startup")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("app_shutdown")
        app.state.redis.close()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness check."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check(request: Request):
        """
        Readiness check endpoint.

        The database is required; the cache is reported but optional since
        reads fall through to the database without it.

        Returns 200 if ready, 503 if not ready.
        """
        checks = {
            "database": db.health_check()["healthy"],
            "cache": request.app.state.redis.ping(),
        }

        if not checks["database"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )

        return {"status": "ready", "checks": checks}

    @app.get("/health/detailed", tags=["health"])
    def health_check_detailed(request: Request):
        """
        Detailed health check with infrastructure status.

        Only available in debug mode to prevent information disclosure.
        """
        if not settings.debug:
            return {"error": "Detailed health info only available in debug mode"}

        return {
            "status": "ok",
            "database": db.health_check(),
            "cache": request.app.state.redis.health_check(),
        }

    app.include_router(drivers_router.router, prefix=api_prefix)

    return app


app = create_app()
