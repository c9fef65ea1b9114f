"""Temporal connection settings for the choreography worker and engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from choreo.core.config import AppSettings, get_settings


@dataclass
class TemporalConfig:
    """Materialized Temporal connection settings."""

    host: str | None
    namespace: str | None
    api_key: str | None
    task_queue: str
    tls_enabled: bool

    @property
    def enabled(self) -> bool:
        """A host and namespace are enough; a self-hosted server runs without an API key."""
        return bool(self.host and self.namespace)

    def connect_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``Client.connect``. The API key is sent only when set."""
        options: Dict[str, Any] = {"namespace": self.namespace, "tls": self.tls_enabled}
        if self.api_key:
            options["api_key"] = self.api_key
        return options


def get_temporal_config(settings: AppSettings | None = None) -> TemporalConfig:
    settings = settings or get_settings()
    return TemporalConfig(
        host=settings.temporal_host,
        namespace=settings.temporal_namespace,
        api_key=settings.temporal_api_key,
        task_queue=settings.temporal_task_queue,
        tls_enabled=settings.temporal_tls_enabled,
    )
