"""Minimal JSON path resolution used by wait-states, choices and matchers.

Supported forms: ``$`` (the whole document), ``$.a.b`` (dotted lookup into
the current data) and ``$$.a.b`` (dotted lookup into the context object).
List indices are written as plain segments, e.g. ``$.items.0.id``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class InvalidPathError(ValueError):
    """Raised when a path is not in one of the supported forms."""


def _walk(document: Any, segments: list[str]) -> Any:
    current = document
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def _segments(path: str, prefix: str) -> list[str]:
    remainder = path[len(prefix):]
    if not remainder:
        return []
    if not remainder.startswith(".") or remainder.endswith(".") or ".." in remainder:
        raise InvalidPathError(f"Unsupported path '{path}'")
    return remainder[1:].split(".")


def resolve_path(path: str, data: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
    """Return the value ``path`` points at, or ``None`` when it is absent."""

    if path.startswith("$$"):
        return _walk(context or {}, _segments(path, "$$"))
    if path.startswith("$"):
        return _walk(data, _segments(path, "$"))
    raise InvalidPathError(f"Path '{path}' must start with '$' or '$$'")


def execution_context(*, execution_id: str, name: str, input_payload: Any) -> dict[str, Any]:
    """Context object exposed to ``$$`` paths while an execution runs."""

    return {"Execution": {"Id": execution_id, "Name": name, "Input": input_payload}}
