"""Pydantic schemas for API payloads."""

from choreo.schemas.choreography import ChoreographyResponse, EventMatcherResponse
from choreo.schemas.correlation import CorrelationRecordResponse, CorrelationRequest, CorrelationResponse
from choreo.schemas.event import EventIngestResponse, RouteResultResponse
from choreo.schemas.execution import ExecutionStartRequest, ExecutionStartResponse

__all__ = [
    "ChoreographyResponse",
    "CorrelationRecordResponse",
    "CorrelationRequest",
    "CorrelationResponse",
    "EventIngestResponse",
    "EventMatcherResponse",
    "ExecutionStartRequest",
    "ExecutionStartResponse",
    "RouteResultResponse",
]
