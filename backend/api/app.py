"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from shared.exceptions import ConfigurationError
from shared.logging_config import configure_logging
from .errors import register_exception_handlers
from .routes import health
from modules.auth.routes import router as auth_router
from modules.billing.routes import router as billing_router
from modules.checkout.routes import router as checkout_router
from modules.customers.routes import router as customers_router
from modules.subscriptions.routes import router as subscriptions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Refuses to start when required configuration is missing.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)

    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}",
            code="MISSING_CONFIGURATION",
            details={"missing": missing},
        )

    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Stripe billing and Supabase account backend for the SaaS kit",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(customers_router, prefix="/api", tags=["customers"])
    app.include_router(subscriptions_router, prefix="/api", tags=["subscriptions"])
    app.include_router(checkout_router, prefix="/api", tags=["checkout"])
    app.include_router(billing_router, prefix="/api", tags=["billing"])
    app.include_router(auth_router, prefix="/api", tags=["auth"])

    return app


# Application instance for uvicorn
app = create_app()
