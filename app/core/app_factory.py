"""Application factory for the FastAPI app.

Builds the app with its own ``ServiceContainer`` so the login throttle and
user store belong to one app instance instead of module globals.
"""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import auth_router, health_router, users_router
from app.core.config import settings
from app.core.container import ServiceContainer, build_container
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        container: Pre-built services (tests inject fakes or clocks here).
            A fresh in-memory container is built when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="User Auth API",
        description=(
            "User management backend with email/password login. Failed logins "
            "are throttled per account: five consecutive failures lock the "
            "account for 30 minutes."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )
    app.state.services = container or build_container()

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(auth_router, prefix="/v1")
    app.include_router(users_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
