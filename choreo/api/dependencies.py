"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from fastapi import Depends

from choreo.correlation import EventCorrelator
from choreo.events_engine.router import ChoreographyRouter
from choreo.token_store import TokenStore, get_token_store
from choreo.workflow_engine import ChoreographyRegistry, WorkflowEngine, WorkflowInitiator
from choreo.workflow_engine.registry import get_choreography_registry


def get_registry() -> ChoreographyRegistry:
    return get_choreography_registry()


def get_store() -> TokenStore:
    return get_token_store()


def get_engine() -> WorkflowEngine:
    from choreo.workflow_orchestration import get_workflow_engine

    return get_workflow_engine()


def get_initiator(
    engine: WorkflowEngine = Depends(get_engine),
    store: TokenStore = Depends(get_store),
) -> WorkflowInitiator:
    return WorkflowInitiator(engine=engine, token_store=store)


def get_correlator(
    engine: WorkflowEngine = Depends(get_engine),
    store: TokenStore = Depends(get_store),
) -> EventCorrelator:
    return EventCorrelator(engine=engine, token_store=store)


def get_router(
    registry: ChoreographyRegistry = Depends(get_registry),
    initiator: WorkflowInitiator = Depends(get_initiator),
    correlator: EventCorrelator = Depends(get_correlator),
) -> ChoreographyRouter:
    return ChoreographyRouter(registry=registry, initiator=initiator, correlator=correlator)
