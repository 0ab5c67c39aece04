"""Listener bootstrap binding the plugin application to a socket."""

import logging
import threading
from typing import Optional

import uvicorn

from external_dns_plugin.app import create_app
from external_dns_plugin.core.config import Settings
from external_dns_plugin.core.provider import Provider

logger = logging.getLogger(__name__)


class PluginServer(uvicorn.Server):
    """uvicorn server that signals once its socket accepts connections."""

    def __init__(self, config: uvicorn.Config, ready: Optional[threading.Event] = None):
        super().__init__(config)
        self.ready = ready

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)

        if self.started and self.ready is not None:
            self.ready.set()


def build_server(
    settings: Settings,
    provider: Optional[Provider] = None,
    ready: Optional[threading.Event] = None,
) -> PluginServer:
    """Create the server for the given settings without starting it."""
    config = uvicorn.Config(
        create_app(settings, provider),
        host=settings.webhook_host,
        port=settings.webhook_port,
        log_config=None,
        access_log=settings.log_level in ("debug", "trace"),
    )

    return PluginServer(config, ready=ready)


def serve(
    settings: Settings,
    provider: Optional[Provider] = None,
    ready: Optional[threading.Event] = None,
) -> None:
    """Serve the plugin API until interrupted."""
    server = build_server(settings, provider, ready)
    logger.info(
        "listening on %s:%s (read timeout %ss, write timeout %ss)",
        settings.webhook_host,
        settings.webhook_port,
        settings.webhook_read_timeout,
        settings.webhook_write_timeout,
    )
    server.run()
