"""EventBridge-style event pattern matching.

Supported pattern values: lists of literals and of the ``anything-but``,
``prefix`` and ``exists`` operators; nested objects match nested fields.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from choreo.core.paths import resolve_path
from choreo.events_engine.schemas import EventEnvelope

_OPERATORS = {"anything-but", "prefix", "exists"}


class InvalidPatternError(ValueError):
    """Raised for patterns that use unsupported syntax."""


def _check_pattern(pattern: Mapping[str, Any], location: str = "") -> None:
    for key, expected in pattern.items():
        path = f"{location}.{key}" if location else key
        if isinstance(expected, Mapping):
            _check_pattern(expected, path)
            continue
        if not isinstance(expected, list) or not expected:
            raise InvalidPatternError(f"Pattern field '{path}' must be a non-empty list or an object")
        for rule in expected:
            if isinstance(rule, Mapping):
                if len(rule) != 1 or next(iter(rule)) not in _OPERATORS:
                    raise InvalidPatternError(f"Unsupported operator {dict(rule)!r} in '{path}'")


def _match_operator(rule: Mapping[str, Any], candidates: List[Any], present: bool) -> bool:
    operator, argument = next(iter(rule.items()))
    if operator == "exists":
        return present is bool(argument)
    if not present:
        return False
    if operator == "anything-but":
        excluded = argument if isinstance(argument, list) else [argument]
        return all(candidate not in excluded for candidate in candidates)
    return any(isinstance(candidate, str) and candidate.startswith(argument) for candidate in candidates)


def _match_values(rules: List[Any], actual: Any, present: bool) -> bool:
    candidates = actual if isinstance(actual, list) else [actual]
    for rule in rules:
        if isinstance(rule, Mapping):
            if _match_operator(rule, candidates, present):
                return True
        elif present and rule in candidates:
            return True
    return False


def match_pattern(pattern: Mapping[str, Any], document: Mapping[str, Any]) -> bool:
    """Return True when ``document`` satisfies every field of ``pattern``."""

    for key, expected in pattern.items():
        present = key in document
        actual = document.get(key)
        if isinstance(expected, Mapping):
            if not isinstance(actual, Mapping) or not match_pattern(expected, actual):
                return False
        elif not _match_values(expected, actual, present):
            return False
    return True


class EventMatcher(BaseModel):
    """Selects events for a choreography and locates their entity id."""

    model_config = ConfigDict(frozen=True)

    pattern: Dict[str, Any]
    entity_id_path: str = Field(default="$.detail.id")

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        _check_pattern(value)
        return value

    def matches(self, envelope: EventEnvelope) -> bool:
        return match_pattern(self.pattern, envelope.to_event_document())

    def entity_id(self, envelope: EventEnvelope) -> str | None:
        value = resolve_path(self.entity_id_path, envelope.to_event_document())
        return None if value is None else str(value)
