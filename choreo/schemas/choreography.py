"""Choreography catalog schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class EventMatcherResponse(BaseModel):
    pattern: Dict[str, Any]
    entity_id_path: str


class ChoreographyResponse(BaseModel):
    name: str
    description: str
    start_event: EventMatcherResponse
    events: List[EventMatcherResponse]
    timeout_seconds: Optional[float]
    states: List[str]
