"""Publishers responsible for delivering events to the event bus."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from choreo.events_engine.schemas import EventEnvelope

LOGGER = logging.getLogger("choreo.events_engine.publisher")


class EventPublishError(RuntimeError):
    """Raised when the bus rejects an event."""


class EventPublisher(Protocol):
    """Transport abstraction for event delivery."""

    def publish(self, envelope: EventEnvelope) -> None:
        ...


class NullEventPublisher(EventPublisher):
    """No-op publisher used when no bus is configured."""

    def publish(self, envelope: EventEnvelope) -> None:  # noqa: D401
        LOGGER.debug(
            "events_engine_publish_skipped",
            extra={"event_id": str(envelope.event_id), "detail_type": envelope.detail_type},
        )


class EventBridgeEventPublisher(EventPublisher):
    """Publishes events to an Amazon EventBridge bus."""

    def __init__(self, *, event_bus_name: str, region_name: Optional[str] = None, client: Any = None) -> None:
        self._event_bus_name = event_bus_name
        self._client = client or boto3.client("events", region_name=region_name)

    def publish(self, envelope: EventEnvelope) -> None:
        entry = {
            "Source": envelope.source,
            "DetailType": envelope.detail_type,
            "Detail": json.dumps(envelope.detail, default=str),
            "EventBusName": self._event_bus_name,
            "Time": envelope.time,
        }
        try:
            response = self._client.put_events(Entries=[entry])
        except (BotoCoreError, ClientError):
            LOGGER.exception(
                "events_engine_publish_failed",
                extra={
                    "event_id": str(envelope.event_id),
                    "detail_type": envelope.detail_type,
                    "event_bus_name": self._event_bus_name,
                },
            )
            raise

        if response.get("FailedEntryCount"):
            failure = response.get("Entries", [{}])[0]
            LOGGER.error(
                "events_engine_publish_rejected",
                extra={
                    "event_id": str(envelope.event_id),
                    "error_code": failure.get("ErrorCode"),
                    "error_message": failure.get("ErrorMessage"),
                },
            )
            raise EventPublishError(failure.get("ErrorMessage") or "EventBridge rejected the event")

        LOGGER.info(
            "events_engine_published",
            extra={
                "event_id": str(envelope.event_id),
                "source": envelope.source,
                "detail_type": envelope.detail_type,
            },
        )


_publisher: Optional[EventPublisher] = None


def get_event_publisher() -> EventPublisher:
    """Return the process-wide publisher for the configured bus."""

    global _publisher
    if _publisher is not None:
        return _publisher

    from choreo.events_engine.config import get_event_engine_config

    config = get_event_engine_config()
    if config.event_bus_name:
        _publisher = EventBridgeEventPublisher(event_bus_name=config.event_bus_name, region_name=config.region_name)
    else:
        _publisher = NullEventPublisher()
    return _publisher


def set_event_publisher(publisher: Optional[EventPublisher]) -> None:
    """Override the cached publisher (primarily for tests)."""

    global _publisher
    _publisher = publisher
