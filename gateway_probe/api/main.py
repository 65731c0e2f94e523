"""
Process entry point for gateway-probe.

Architectural role:
- Loads environment configuration (`.env` via `gateway_probe.config`).
- Optionally opens the PostgreSQL connection when `GATEWAY_USE_DATABASE` is set.
- Calls `ai_function` once and logs the answer.

Request lifecycle:
1. Parse `--prompt`, `--model`, `--base-url` (defaults from environment).
2. Configure logging from `LOG_LEVEL`.
3. Open and ping the database if enabled; close it on exit.
4. Invoke `ai_function(prompt, model)`.
5. Log `AI response: ...` and exit 0, or log the error and exit 1.
"""

import argparse
import logging
import os
import sys

from gateway_probe.api.service import ai_function
from gateway_probe.config.gateway_config import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
    database_enabled,
    load_gateway_settings,
    log_level,
)
from gateway_probe.core.errors import GatewayError
from gateway_probe.db.connection import open_database


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gateway-probe",
        description="Ask an AI gateway of unknown API shape for an answer.",
    )
    parser.add_argument("--prompt", default=os.getenv("GATEWAY_PROMPT") or DEFAULT_PROMPT)
    parser.add_argument("--model", default=os.getenv("GATEWAY_MODEL") or DEFAULT_MODEL)
    parser.add_argument("--base-url", default=None, help="override GATEWAY_BASE_URL")
    return parser


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None) -> int:
    """Run one query and return the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        configure_logging()
    except GatewayError as err:
        logger.error("Invalid logging configuration: %s", err)
        return 1

    connection = None
    try:
        if database_enabled():
            connection = open_database()

        settings = load_gateway_settings(args.base_url)
        response = ai_function(args.prompt, args.model, settings=settings)
    except GatewayError as err:
        logger.error("Error querying AI: %s", err)
        return 1
    finally:
        if connection is not None:
            connection.close()

    logger.info("AI response: %s", response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
