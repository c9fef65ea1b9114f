"""Sample choreographies shipped with the service."""

from __future__ import annotations

from typing import List

from choreo.definition.builder import DEFAULT_ENTITY_ID_PATH, ChoreographyStateBuilder
from choreo.definition.choreography import Choreography

from .car import car_choreography
from .order import order_choreography

__all__ = ["car_choreography", "order_choreography", "sample_choreographies"]


def sample_choreographies(*, token_table: str, entity_id_path: str = DEFAULT_ENTITY_ID_PATH) -> List[Choreography]:
    """Return the Order and Car choreographies wired to ``token_table``."""

    builder = ChoreographyStateBuilder(token_table=token_table, entity_id_path=entity_id_path)
    return [order_choreography(builder), car_choreography(builder)]
