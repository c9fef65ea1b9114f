"""Temporal worker entry point for production use."""

from __future__ import annotations

import asyncio
import logging
import sys

from choreo.core.config import get_settings
from choreo.core.logging import configure_logging
from choreo.workflow_orchestration.worker import run_worker


def main() -> None:
    """Run the Temporal worker with the service logging configuration."""
    configure_logging(get_settings())

    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        logging.info("Worker stopped by user")
    except Exception as e:
        logging.error(f"Worker failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
