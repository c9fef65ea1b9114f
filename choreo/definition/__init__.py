"""Choreography definitions: state graph, wait-state builder and validation."""

from __future__ import annotations

__all__ = [
    "Choreography",
    "ChoreographyStateBuilder",
    "DefinitionValidationError",
    "StateGraph",
    "WaitState",
    "WaitStateSpec",
    "build_wait_state",
    "validate_definition",
]

from .builder import ChoreographyStateBuilder, WaitStateSpec, build_wait_state  # noqa: E402
from .choreography import Choreography  # noqa: E402
from .states import StateGraph, WaitState  # noqa: E402
from .validator import DefinitionValidationError, validate_definition  # noqa: E402
