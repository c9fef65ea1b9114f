"""Replays a scripted sequence of events against the event bus."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping

from choreo.events_engine.publisher import EventPublisher, NullEventPublisher, get_event_publisher
from choreo.events_engine.schemas import EventEnvelope

LOGGER = logging.getLogger("choreo.simulation")


@dataclass(frozen=True)
class SimulationEntry:
    """One event to publish and the pause that follows it."""

    source: str
    detail_type: str
    detail: Dict[str, Any] = field(default_factory=dict)
    wait_seconds: float = 0

    @classmethod
    def from_mapping(cls, item: Mapping[str, Any]) -> "SimulationEntry":
        """Read an entry written as ``{"source", "detailType", "detail", "wait"}``."""

        try:
            source = item["source"]
            detail_type = item["detailType"]
        except KeyError as exc:
            raise ValueError(f"Simulation entry is missing {exc.args[0]!r}") from exc
        wait = item.get("wait", 0) or 0
        if wait < 0:
            raise ValueError("Simulation entry wait must not be negative")
        return cls(source=source, detail_type=detail_type, detail=dict(item.get("detail") or {}), wait_seconds=wait)


def load_entries(document: Mapping[str, Any]) -> List[SimulationEntry]:
    """Parse ``{"events": [...]}`` into simulation entries."""

    events = document.get("events")
    if not isinstance(events, list):
        raise ValueError("Simulation document needs an 'events' list")
    return [SimulationEntry.from_mapping(item) for item in events]


class PublisherNotConfiguredError(RuntimeError):
    """Raised when a live simulation run has no event bus to publish to."""


def simulation_publisher(*, dry_run: bool) -> EventPublisher:
    """Pick the publisher for a run. Live runs require CHOREO_EVENT_BUS_NAME."""

    if dry_run:
        return NullEventPublisher()
    publisher = get_event_publisher()
    if isinstance(publisher, NullEventPublisher):
        raise PublisherNotConfiguredError(
            "CHOREO_EVENT_BUS_NAME is not configured; pass --dry-run to only log the events"
        )
    return publisher


class WorkflowSimulation:
    """Publishes entries one at a time, sleeping ``wait_seconds`` after each."""

    def __init__(
        self,
        publisher: EventPublisher,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._publisher = publisher
        self._sleep = sleep

    async def run(self, entries: Iterable[SimulationEntry]) -> List[EventEnvelope]:
        published: List[EventEnvelope] = []
        for index, entry in enumerate(entries):
            envelope = EventEnvelope(source=entry.source, detail_type=entry.detail_type, detail=entry.detail)
            self._publisher.publish(envelope)
            published.append(envelope)
            LOGGER.info(
                "simulation_event_published",
                extra={
                    "position": index,
                    "source": entry.source,
                    "detail_type": entry.detail_type,
                    "wait_seconds": entry.wait_seconds,
                },
            )
            if entry.wait_seconds:
                await self._sleep(entry.wait_seconds)
        return published
