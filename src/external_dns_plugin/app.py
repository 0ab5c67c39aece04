"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from external_dns_plugin.api.routes import RouteDependencies, router
from external_dns_plugin.core.config import Settings, get_settings
from external_dns_plugin.core.memory import InMemoryProvider
from external_dns_plugin.core.provider import Provider
from external_dns_plugin.utils.exceptions import capture_exception
from external_dns_plugin.utils.observability import init_sentry
from external_dns_plugin.utils.timeouts import TimeoutMiddleware

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Return the installed package version."""
    try:
        return version("external-dns-plugin")
    except PackageNotFoundError:
        return "unknown"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = app.state.dependencies.settings
    init_sentry(settings)

    logger.info("start ExternalDNS plugin v%s", app.version)
    logger.info("config: %s", settings.summary())
    logger.info("Provider: %s", type(app.state.dependencies.provider).__name__)
    logger.info(f"Sentry: {'enabled' if settings.sentry_dsn else 'disabled'}")

    if settings.dry_run:
        logger.info("running in dry-run mode. No changes to DNS records will be made.")

    yield

    # Shutdown
    logger.info("ExternalDNS plugin shutting down...")


async def http_error(_request: Request, exc: StarletteHTTPException) -> Response:
    """Answer protocol errors with the bare status code and no body."""
    return Response(status_code=exc.status_code, headers=exc.headers)


async def unexpected_error(request: Request, exc: Exception) -> Response:
    """Answer unexpected failures with an empty 500."""
    capture_exception(exc, {"method": request.method, "path": request.url.path})
    return Response(status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[Provider] = None,
) -> FastAPI:
    """
    Build the plugin application.

    Args:
        settings: Application settings, read from the environment if omitted
        provider: Record provider, an in-memory one built from settings if omitted

    Returns:
        The configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    if provider is None:
        provider = InMemoryProvider.from_settings(settings)

    app = FastAPI(
        title="ExternalDNS Plugin",
        description="ExternalDNS webhook provider adapter",
        version=get_version(),
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.dependencies = RouteDependencies(provider=provider, settings=settings)

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(Exception, unexpected_error)
    app.add_middleware(
        TimeoutMiddleware,
        read_timeout=settings.webhook_read_timeout,
        write_timeout=settings.webhook_write_timeout,
    )

    app.include_router(router)

    return app
