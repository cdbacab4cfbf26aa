"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from signin.config import Settings
from signin.domain.repository import Database
from signin.interface.api.routes import auth, health
from signin.util.di.container import create_container, setup_di
from signin.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (defaults to the production container)
    """
    settings = Settings()

    # Instrument httpx for outbound HTTP requests (token and userinfo calls)
    # (Logfire must be configured before instrumentation)
    instrument_httpx()

    # Settings are loaded from environment automatically
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # OAuth strategies look the database handle up on app.state
        app.state.database = await container.get(Database)
        yield
        await container.close()

    app_instance = FastAPI(
        title="Sign-in API",
        description="Third-party login onboarding: Google, Discord and Microsoft",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Authlib keeps OAuth state in the session between redirect and callback
    app_instance.add_middleware(
        SessionMiddleware,
        secret_key=settings.auth.session_secret,
        https_only=settings.api.protocol == "https",
    )

    setup_di(app_instance, container)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
