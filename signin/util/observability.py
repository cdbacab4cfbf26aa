"""Observability configuration using Logfire.

Every login produces one trace: the FastAPI request span, the outbound
token and userinfo calls (httpx), the find-or-create span and the SQL it
runs.

Usage:
    import logfire

    logfire.info("User created", user_id=user.id, provider=user.provider)

    with logfire.span("find_or_create_user", provider=provider):
        ...
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from signin.config import Settings

# OAuth material that must never reach a span attribute or log line
SCRUB_PATTERNS = [
    "client_secret",
    "access_token",
    "refresh_token",
    "id_token",
    "code_verifier",
]

# Polled by load balancers; tracing it only adds noise
EXCLUDED_URLS = "/health"


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Telemetry is sent to Logfire cloud when explicitly enabled through
    OBSERVABILITY__SEND_TO_LOGFIRE, or otherwise when a token is present.
    Without either, output stays on the console.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs = {
        "service_name": "signin-backend",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "scrubbing": logfire.ScrubbingOptions(extra_patterns=SCRUB_PATTERNS),
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request except health checks.

    Headers are not captured: the session cookie carries OAuth state and
    the callback query string carries the authorization code.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        """Keep the provider path segment, drop query values."""
        result = {
            key: value for key, value in attributes.items() if key != "values"
        }
        result["method"] = request.method
        result["path"] = request.url.path
        if request.client:
            result["client_host"] = request.client.host
        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        excluded_urls=EXCLUDED_URLS,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace queries against the users table.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace outbound calls to provider token and userinfo endpoints.

    Authlib's Starlette client is built on httpx, so this covers Google,
    Discord and Microsoft alike.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
