"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from choreo.core.config import get_settings

router = APIRouter()


@router.get("/healthz", summary="Liveness check")
def health_check() -> dict[str, str]:
    settings = get_settings()
    return {"status": "ok", "service": settings.service_name, "token_store": settings.token_store_backend}
