"""Logging and Sentry setup, driven by explicit settings."""

import json
import logging
import sys
from datetime import datetime, timezone

import sentry_sdk

from external_dns_plugin.core.config import Settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ExternalDNS level names mapped onto stdlib levels
LOG_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)

        return json.dumps(entry)


def configure_logging(settings: Settings) -> None:
    """Install a stdout handler with the configured format and level."""
    handler = logging.StreamHandler(sys.stdout)

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logging.basicConfig(
        level=LOG_LEVELS[settings.log_level],
        handlers=[handler],
        force=True,
    )

    # Keep uvicorn's own loggers on the same output
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if configured."""
    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
