"""Router registrations."""

from fastapi import APIRouter

from choreo.api.routers import choreographies, correlations, events, executions, health


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(events.router, prefix="/api/v1/events", tags=["events"])
    router.include_router(executions.router, prefix="/api/v1/executions", tags=["executions"])
    router.include_router(correlations.router, prefix="/api/v1/correlations", tags=["correlations"])
    router.include_router(choreographies.router, prefix="/api/v1/choreographies", tags=["choreographies"])
    return router
