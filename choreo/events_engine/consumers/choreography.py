"""Choreography event ingestion wired through the events engine."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from choreo.events_engine.config import EventEngineConfig, get_event_engine_config
from choreo.events_engine.consumers.base import SQSEventConsumer
from choreo.events_engine.router import ChoreographyRouter, get_choreography_router
from choreo.events_engine.schemas import EventEnvelope

LOGGER = logging.getLogger("choreo.events_engine.consumers.choreography")


def build_choreography_handler(
    router_provider: Callable[[], ChoreographyRouter] = get_choreography_router,
) -> Callable[[Dict[str, Any]], None]:
    """Return an SQS handler that routes each event to its choreographies."""

    # One loop for the consumer's lifetime; the Temporal client is bound to the loop it connected on.
    loop = asyncio.new_event_loop()

    def _handle(payload: Dict[str, Any]) -> None:
        envelope = EventEnvelope.model_validate(payload)
        results = loop.run_until_complete(router_provider().route(envelope))
        LOGGER.info(
            "choreography_event_ingested",
            extra={
                "event_id": str(envelope.event_id),
                "detail_type": envelope.detail_type,
                "routes": [f"{result.choreography}:{result.action}" for result in results],
            },
        )

    return _handle


class ChoreographySQSEventConsumer(SQSEventConsumer):
    """SQS consumer specialized for choreography events."""

    def __init__(
        self,
        *,
        queue_url: str,
        region_name: str | None = None,
        wait_time_seconds: int = 20,
        visibility_timeout: int | None = None,
        max_messages: int = 5,
        router_provider: Callable[[], ChoreographyRouter] = get_choreography_router,
        client: Any = None,
    ) -> None:
        super().__init__(
            queue_url=queue_url,
            handler=build_choreography_handler(router_provider),
            region_name=region_name,
            wait_time_seconds=wait_time_seconds,
            visibility_timeout=visibility_timeout,
            max_messages=max_messages,
            client=client,
        )


def build_choreography_consumer_from_settings(
    config: Optional[EventEngineConfig] = None,
) -> ChoreographySQSEventConsumer:
    """Construct a choreography consumer from application settings."""

    config = config or get_event_engine_config()
    if not config.queue_url:
        raise RuntimeError("CHOREO_SQS_QUEUE_URL is not configured")

    return ChoreographySQSEventConsumer(
        queue_url=config.queue_url,
        region_name=config.region_name,
        max_messages=config.max_messages,
        wait_time_seconds=config.wait_time_seconds,
        visibility_timeout=config.visibility_timeout,
    )
