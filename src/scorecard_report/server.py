"""
server.py — Process entry point
===============================
  1. configure logging (rich console handler)
  2. load Settings once from the environment; a ConfigError here is fatal
     and the process exits before the listener is bound
  3. build the Flask app and serve it on HOST:PORT

Run:   python -m scorecard_report      (or the ``scorecard-report`` script)
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

from scorecard_report.app import create_app
from scorecard_report.config import get_settings
from scorecard_report.errors import ConfigError

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Route all records through a single RichHandler on stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True,
                              show_path=False)],
        force=True,
    )


def main() -> int:
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        settings = get_settings()
    except ConfigError as exc:
        logger.critical("Refusing to start: %s", exc)
        sys.exit(1)

    configure_logging(settings.server.log_level)
    for key, value in settings.status_summary().items():
        logger.info("%-10s %s", key, value)

    app = create_app(settings)
    logger.info("Server starting on port %d", settings.server.port)
    app.run(host=settings.server.host, port=settings.server.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
