"""Binding of a validated definition to the events that drive it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from choreo.definition.states import StateGraph
from choreo.definition.validator import validate_definition
from choreo.events_engine.matcher import EventMatcher


@dataclass(frozen=True)
class Choreography:
    """A state graph plus the event that starts it and the events that move it.

    The definition is validated on construction, so an instance that exists
    can always be deployed.
    """

    name: str
    definition: StateGraph
    start_event: EventMatcher
    events: Tuple[EventMatcher, ...] = field(default_factory=tuple)
    timeout: Optional[timedelta] = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("A choreography needs a name")
        object.__setattr__(self, "events", tuple(self.events))
        validate_definition(self.definition)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "start_event": self.start_event.model_dump(),
            "events": [matcher.model_dump() for matcher in self.events],
            "timeout_seconds": self.timeout.total_seconds() if self.timeout else None,
            "states": [state.name for state in self.definition.states],
        }
