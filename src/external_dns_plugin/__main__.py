"""Entry point for running the plugin directly."""

import sys

from pydantic import ValidationError

from external_dns_plugin.core.config import Settings
from external_dns_plugin.server import serve
from external_dns_plugin.utils.observability import configure_logging


def main():
    """Run the plugin."""
    try:
        settings = Settings()
    except ValidationError as e:
        sys.exit(f"invalid configuration: {e}")

    configure_logging(settings)

    serve(settings)


if __name__ == "__main__":
    main()
