"""Execution start endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from choreo.api.dependencies import get_initiator, get_registry
from choreo.schemas.execution import ExecutionStartRequest, ExecutionStartResponse
from choreo.workflow_engine import ChoreographyRegistry, WorkflowInitiator

router = APIRouter()


@router.post(
    "",
    response_model=ExecutionStartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_execution(
    payload: ExecutionStartRequest,
    registry: ChoreographyRegistry = Depends(get_registry),
    initiator: WorkflowInitiator = Depends(get_initiator),
) -> ExecutionStartResponse:
    registry.require(payload.definition_id)
    execution_id = await initiator.start(payload.entity_id, payload.definition_id, payload.input)
    return ExecutionStartResponse(
        entity_id=payload.entity_id,
        definition_id=payload.definition_id,
        execution_id=execution_id,
    )
