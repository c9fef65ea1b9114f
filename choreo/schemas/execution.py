"""Execution start schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ExecutionStartRequest(BaseModel):
    entity_id: str = Field(..., min_length=1, max_length=255)
    definition_id: str = Field(..., min_length=1, max_length=120)
    input: Any = Field(default=None, description="Execution input handed to the definition.")


class ExecutionStartResponse(BaseModel):
    entity_id: str
    definition_id: str
    execution_id: str
