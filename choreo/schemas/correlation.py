"""Correlation schemas."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from choreo.correlation.correlator import CorrelationOutcome


class CorrelationRequest(BaseModel):
    """A domain event reduced to its correlation fields."""

    entity_id: str = Field(..., min_length=1, max_length=255)
    branch_key: str = Field(..., min_length=1, max_length=255, description="Event name, e.g. its detail type.")
    payload: Any = None


class CorrelationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    outcome: CorrelationOutcome
    entity_id: str
    branch_key: str
    execution_id: Optional[str] = None


class CorrelationRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entity_id: str
    branch_key: str
    token: Optional[str] = None
    execution_id: Optional[str] = None
