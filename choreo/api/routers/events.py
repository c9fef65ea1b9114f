"""Event ingestion endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from choreo.api.dependencies import get_router
from choreo.events_engine.router import ChoreographyRouter
from choreo.events_engine.schemas import EventEnvelope
from choreo.schemas.event import EventIngestResponse, RouteResultResponse

router = APIRouter()


@router.post(
    "",
    response_model=EventIngestResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def ingest_event(
    envelope: EventEnvelope,
    choreography_router: ChoreographyRouter = Depends(get_router),
) -> EventIngestResponse:
    results = await choreography_router.route(envelope)
    return EventIngestResponse(
        event_id=str(envelope.event_id),
        detail_type=envelope.detail_type,
        routes=[
            RouteResultResponse(
                choreography=result.choreography,
                action=result.action,
                entity_id=result.entity_id,
                execution_id=result.execution_id,
                outcome=result.correlation.outcome if result.correlation else None,
            )
            for result in results
        ],
    )
