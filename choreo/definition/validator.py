"""Checks that a definition only performs work through wait-states."""

from __future__ import annotations

from typing import Dict, List

from choreo.definition.states import TASK_STATE_TYPES, State, StateGraph, StateType


class DefinitionValidationError(ValueError):
    """Raised when a choreography definition cannot be deployed."""

    def __init__(self, message: str, *, state_name: str | None = None) -> None:
        super().__init__(message)
        self.state_name = state_name


def find_reachable_states(graph: StateGraph) -> List[State]:
    """Return states reachable from ``graph.start_at``, including nested branches.

    Raises :class:`DefinitionValidationError` for transitions to unknown states.
    """

    by_name: Dict[str, State] = {state.name: state for state in graph.states}
    if graph.start_at not in by_name:
        raise DefinitionValidationError(f"Start state '{graph.start_at}' is not defined")

    reachable: List[State] = []
    visited: set[str] = set()
    pending = [graph.start_at]
    while pending:
        name = pending.pop()
        if name in visited:
            continue
        visited.add(name)
        state = by_name[name]
        reachable.append(state)

        for target in state.transitions():
            if target not in by_name:
                raise DefinitionValidationError(
                    f"State {name} transitions to undefined state '{target}'",
                    state_name=name,
                )
            pending.append(target)

        if state.type == StateType.PARALLEL.value:
            for branch in state.branches:
                reachable.extend(find_reachable_states(branch))
    return reachable


def validate_definition(graph: StateGraph) -> List[State]:
    """Reject definitions whose reachable task states are not wait-states."""

    states = find_reachable_states(graph)
    for state in states:
        kind = StateType(state.type)
        if kind in TASK_STATE_TYPES and kind is not StateType.WAIT:
            raise DefinitionValidationError(
                f"State {state.name} must be a choreography wait-state.",
                state_name=state.name,
            )
    return states
