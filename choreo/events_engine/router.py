"""Routes bus events to the initiator or the correlator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from choreo.correlation.correlator import CorrelationEvent, CorrelationResult, EventCorrelator
from choreo.definition.choreography import Choreography
from choreo.events_engine.matcher import EventMatcher
from choreo.events_engine.schemas import EventEnvelope
from choreo.workflow_engine.initiator import WorkflowInitiator
from choreo.workflow_engine.registry import ChoreographyRegistry

LOGGER = logging.getLogger("choreo.events_engine.router")


@dataclass(frozen=True)
class RouteResult:
    choreography: str
    action: str
    entity_id: Optional[str]
    execution_id: Optional[str] = None
    correlation: Optional[CorrelationResult] = None


def _execution_input(envelope: EventEnvelope, entity_id: str) -> Dict[str, Any]:
    return {
        "detail": envelope.detail,
        "eventName": envelope.detail_type,
        "entityId": entity_id,
    }


class ChoreographyRouter:
    """Plays the role of the bus rules bound for each registered choreography.

    A start event starts an execution named after its entity id; any other
    matching event goes to the correlator with its detail type as branch key.
    """

    def __init__(
        self,
        *,
        registry: ChoreographyRegistry,
        initiator: WorkflowInitiator,
        correlator: EventCorrelator,
    ) -> None:
        self._registry = registry
        self._initiator = initiator
        self._correlator = correlator

    async def route(self, envelope: EventEnvelope) -> List[RouteResult]:
        results: List[RouteResult] = []
        for choreography in self._registry.all():
            result = await self._route_to(choreography, envelope)
            if result is not None:
                results.append(result)

        if not results:
            LOGGER.debug(
                "event_unrouted",
                extra={"event_id": str(envelope.event_id), "detail_type": envelope.detail_type},
            )
        return results

    async def _route_to(self, choreography: Choreography, envelope: EventEnvelope) -> Optional[RouteResult]:
        if choreography.start_event.matches(envelope):
            entity_id = self._entity_id(choreography, choreography.start_event, envelope)
            if entity_id is None:
                return RouteResult(choreography.name, "skipped", None)
            execution_id = await self._initiator.start(
                entity_id,
                choreography.name,
                _execution_input(envelope, entity_id),
            )
            return RouteResult(choreography.name, "started", entity_id, execution_id=execution_id)

        for matcher in choreography.events:
            if not matcher.matches(envelope):
                continue
            entity_id = self._entity_id(choreography, matcher, envelope)
            if entity_id is None:
                return RouteResult(choreography.name, "skipped", None)
            correlation = await self._correlator.handle(
                CorrelationEvent(
                    entity_id=entity_id,
                    branch_key=envelope.detail_type,
                    payload=_execution_input(envelope, entity_id),
                )
            )
            return RouteResult(
                choreography.name,
                "correlated",
                entity_id,
                execution_id=correlation.execution_id,
                correlation=correlation,
            )
        return None

    @staticmethod
    def _entity_id(choreography: Choreography, matcher: EventMatcher, envelope: EventEnvelope) -> Optional[str]:
        entity_id = matcher.entity_id(envelope)
        if entity_id is None:
            LOGGER.warning(
                "event_missing_entity_id",
                extra={
                    "choreography": choreography.name,
                    "event_id": str(envelope.event_id),
                    "entity_id_path": matcher.entity_id_path,
                },
            )
        return entity_id


_router: Optional[ChoreographyRouter] = None


def get_choreography_router() -> ChoreographyRouter:
    """Return the process-wide router wired to the Temporal engine."""

    global _router
    if _router is not None:
        return _router

    from choreo.token_store import get_token_store
    from choreo.workflow_engine.registry import get_choreography_registry
    from choreo.workflow_orchestration import get_workflow_engine

    engine = get_workflow_engine()
    token_store = get_token_store()
    _router = ChoreographyRouter(
        registry=get_choreography_registry(),
        initiator=WorkflowInitiator(engine=engine, token_store=token_store),
        correlator=EventCorrelator(engine=engine, token_store=token_store),
    )
    return _router


def set_choreography_router(router: Optional[ChoreographyRouter]) -> None:
    """Override the cached router (primarily for tests)."""

    global _router
    _router = router
