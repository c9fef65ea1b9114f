"""In-memory catalog of deployed choreographies."""

from __future__ import annotations

from threading import RLock
from typing import Dict, List, Optional

from choreo.definition.choreography import Choreography
from choreo.workflow_engine.base import ChoreographyError


class UnknownChoreographyError(ChoreographyError):
    """Raised when a definition id does not name a registered choreography."""


class ChoreographyRegistry:
    """Choreographies by name, in registration order."""

    def __init__(self) -> None:
        self._choreographies: Dict[str, Choreography] = {}
        self._lock = RLock()

    def register(self, choreography: Choreography) -> None:
        with self._lock:
            if choreography.name in self._choreographies:
                raise ValueError(f"Choreography '{choreography.name}' is already registered")
            self._choreographies[choreography.name] = choreography

    def get(self, name: str) -> Optional[Choreography]:
        return self._choreographies.get(name)

    def require(self, name: str) -> Choreography:
        choreography = self.get(name)
        if choreography is None:
            raise UnknownChoreographyError(f"Choreography '{name}' is not registered")
        return choreography

    def all(self) -> List[Choreography]:
        with self._lock:
            return list(self._choreographies.values())


_registry: Optional[ChoreographyRegistry] = None


def get_choreography_registry() -> ChoreographyRegistry:
    """Return the process-wide registry, loading the sample catalog when enabled."""

    global _registry
    if _registry is not None:
        return _registry

    from choreo.core.config import get_settings

    settings = get_settings()
    registry = ChoreographyRegistry()
    if settings.load_sample_catalog:
        from choreo.catalog import sample_choreographies

        for choreography in sample_choreographies(
            token_table=settings.token_table_name,
            entity_id_path=settings.default_entity_id_path,
        ):
            registry.register(choreography)
    _registry = registry
    return _registry


def set_choreography_registry(registry: Optional[ChoreographyRegistry]) -> None:
    """Override the cached registry (primarily for tests)."""

    global _registry
    _registry = registry
