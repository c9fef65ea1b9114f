"""Choreography catalog endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from choreo.api.dependencies import get_registry
from choreo.schemas.choreography import ChoreographyResponse
from choreo.workflow_engine import ChoreographyRegistry

router = APIRouter()


@router.get(
    "",
    response_model=List[ChoreographyResponse],
)
def list_choreographies(registry: ChoreographyRegistry = Depends(get_registry)) -> List[ChoreographyResponse]:
    return [ChoreographyResponse.model_validate(choreography.describe()) for choreography in registry.all()]


@router.get(
    "/{name}",
    response_model=ChoreographyResponse,
)
def get_choreography(name: str, registry: ChoreographyRegistry = Depends(get_registry)) -> ChoreographyResponse:
    return ChoreographyResponse.model_validate(registry.require(name).describe())
