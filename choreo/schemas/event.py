"""Event ingestion schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from choreo.correlation.correlator import CorrelationOutcome


class RouteResultResponse(BaseModel):
    """What one choreography did with an ingested event."""

    model_config = ConfigDict(from_attributes=True)

    choreography: str
    action: str
    entity_id: Optional[str]
    execution_id: Optional[str] = None
    outcome: Optional[CorrelationOutcome] = None


class EventIngestResponse(BaseModel):
    event_id: str
    detail_type: str
    routes: List[RouteResultResponse]
