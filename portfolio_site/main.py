"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service.
"""

import argparse

import uvicorn

from portfolio_site.bootstrap import bootstrap_create_application
from portfolio_site.config import config_load_settings


def main() -> None:
    """Run the selected runtime command with validated startup configuration.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Portfolio site back-office runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api",),
        help="Runtime command: `api` starts the HTTP server",
        type=str,
    )
    argument_parser.add_argument("--host", dest="host", type=str, help="Optional bind host override")
    argument_parser.add_argument("--port", dest="port", type=int, help="Optional bind port override")
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=parsed_arguments.host or settings.application_host,
        port=parsed_arguments.port or settings.application_port,
    )


if __name__ == "__main__":
    main()
