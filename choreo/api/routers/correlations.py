"""Correlation endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from choreo.api.dependencies import get_correlator, get_store
from choreo.correlation import CorrelationEvent, EventCorrelator
from choreo.schemas.correlation import CorrelationRecordResponse, CorrelationRequest, CorrelationResponse
from choreo.token_store import TokenStore

router = APIRouter()


@router.post(
    "",
    response_model=CorrelationResponse,
)
async def correlate_event(
    payload: CorrelationRequest,
    correlator: EventCorrelator = Depends(get_correlator),
) -> CorrelationResponse:
    result = await correlator.handle(
        CorrelationEvent(entity_id=payload.entity_id, branch_key=payload.branch_key, payload=payload.payload)
    )
    return CorrelationResponse.model_validate(result, from_attributes=True)


@router.get(
    "/{entity_id}",
    response_model=List[CorrelationRecordResponse],
)
def list_correlation_records(
    entity_id: str,
    store: TokenStore = Depends(get_store),
) -> List[CorrelationRecordResponse]:
    records = sorted(store.get(entity_id), key=lambda record: record.branch_key)
    return [CorrelationRecordResponse.model_validate(record, from_attributes=True) for record in records]
