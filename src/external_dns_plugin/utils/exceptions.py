"""Custom exceptions and error handling utilities."""

import logging
from typing import Optional

import sentry_sdk

logger = logging.getLogger(__name__)


class PluginError(Exception):
    """Base exception for plugin errors."""


class MalformedRequestError(PluginError):
    """Request body does not decode into the expected schema."""


class ProviderError(PluginError):
    """A provider operation failed."""


class BackendUnavailableError(ProviderError):
    """The backend DNS store could not be reached or read."""


class ValidationFailureError(ProviderError):
    """A change batch was rejected by the provider."""


def capture_exception(
    exception: Exception,
    context: Optional[dict] = None,
    level: str = "error",
) -> None:
    """
    Log an exception with its traceback and report it to Sentry.

    Reporting is a no-op unless Sentry was initialized at startup.

    Args:
        exception: The exception to capture
        context: Additional context to include
        level: Log level ('error', 'warning', 'info')
    """
    log_func = getattr(logger, level, logger.error)
    log_func("%s: %s", type(exception).__name__, exception, exc_info=exception)

    sentry_sdk.capture_exception(exception, extras=context or {})
