"""
FastAPI application setup for the TrekHub API.
"""

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from trekhub.config.settings import get_settings, Environment
from trekhub.core.db import STORE_ERRORS, check_connection, get_db, init_db
from trekhub.core.error_handlers import error_handler, setup_error_handlers
from trekhub.core.logging import configure_logging
from trekhub.middleware import AuthenticationMiddleware, RequestContextMiddleware

settings = get_settings()

configure_logging(settings.log_level.value, settings.log_format, settings.log_file)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.
    Creates missing tables outside production, where Alembic owns the schema.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment.value})")

    if settings.environment in (Environment.DEVELOPMENT, Environment.TESTING):
        init_db()

    if settings.is_production() and settings.security.jwt_secret == "please-change-me":
        logger.warning("SECURITY_JWT_SECRET is the default value; tokens can be forged")

    logger.info("Application startup complete")
    yield
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Middleware added last runs first: CORS, then request ids, then the auth gate
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    setup_error_handlers(app)

    from trekhub.api import auth_router, treks_router
    app.include_router(auth_router)
    app.include_router(treks_router)

    @app.get("/")
    def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        """Health check endpoint with database status and error counters."""
        try:
            check_connection(db)
            database = {"status": "healthy", "connection": "ok"}
        except STORE_ERRORS as e:
            logger.error(f"Database health check failed: {type(e).__name__}")
            database = {"status": "unhealthy", "connection": "failed"}

        return {
            "status": "healthy" if database["status"] == "healthy" else "unhealthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {"database": database},
            "error_statistics": error_handler.get_error_statistics(),
        }

    return app


# Create application instance
app = create_app()
