"""Configuration helpers for the events engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from choreo.core.config import AppSettings, get_settings


@dataclass
class EventEngineConfig:
    """Resolved configuration values for the events engine."""

    event_bus_name: Optional[str]
    source: str
    region_name: Optional[str]
    queue_url: Optional[str]
    wait_time_seconds: int
    max_messages: int
    visibility_timeout: Optional[int]


def get_event_engine_config(settings: Optional[AppSettings] = None) -> EventEngineConfig:
    """Materialize events engine configuration from application settings."""

    settings = settings or get_settings()
    return EventEngineConfig(
        event_bus_name=settings.event_bus_name,
        source=settings.event_source,
        region_name=settings.aws_region,
        queue_url=settings.sqs_queue_url,
        wait_time_seconds=settings.sqs_wait_time_seconds,
        max_messages=settings.sqs_max_messages,
        visibility_timeout=settings.sqs_visibility_timeout,
    )
