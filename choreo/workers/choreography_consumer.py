"""Entry point that runs the choreography SQS consumer."""

from __future__ import annotations

from choreo.core.config import get_settings
from choreo.core.logging import configure_logging
from choreo.events_engine.consumers.choreography import build_choreography_consumer_from_settings


def main() -> None:
    configure_logging(get_settings())
    consumer = build_choreography_consumer_from_settings()
    consumer.run_forever()


if __name__ == "__main__":
    main()
