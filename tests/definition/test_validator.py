from __future__ import annotations

import pytest

from choreo.definition import DefinitionValidationError, StateGraph, validate_definition
from choreo.definition.states import ChoiceRule, ChoiceState, ParallelState, StringEquals, SucceedState, TaskState, WaitState
from choreo.definition.validator import find_reachable_states


def _wait(name: str, next: str | None = None, branch_key: str = "Default") -> WaitState:
    return WaitState(name=name, entity_id_path="$$.Execution.Input.detail.id", branch_key=branch_key, next=next)


def test_valid_definition_returns_reachable_states() -> None:
    graph = StateGraph(
        start_at="First",
        states=[_wait("First", next="Done"), SucceedState(name="Done"), SucceedState(name="Orphan")],
    )

    names = [state.name for state in validate_definition(graph)]

    assert sorted(names) == ["Done", "First"]


def test_reachable_task_state_is_rejected_by_name() -> None:
    graph = StateGraph(
        start_at="First",
        states=[_wait("First", next="Charge"), TaskState(name="Charge", activity="charge_card")],
    )

    with pytest.raises(DefinitionValidationError) as exc_info:
        validate_definition(graph)

    assert exc_info.value.state_name == "Charge"
    assert str(exc_info.value) == "State Charge must be a choreography wait-state."


def test_unreachable_task_state_is_allowed() -> None:
    graph = StateGraph(
        start_at="First",
        states=[_wait("First"), TaskState(name="Unused", activity="noop")],
    )

    validate_definition(graph)


def test_task_state_inside_parallel_branch_is_rejected() -> None:
    branch = StateGraph(start_at="Bill", states=[TaskState(name="Bill", activity="bill")])
    graph = StateGraph(
        start_at="Both",
        states=[ParallelState(name="Both", branches=[StateGraph.chain(_wait("Clean", branch_key="Car Cleaned")), branch])],
    )

    with pytest.raises(DefinitionValidationError) as exc_info:
        validate_definition(graph)

    assert exc_info.value.state_name == "Bill"


def test_task_state_behind_choice_is_rejected() -> None:
    graph = StateGraph(
        start_at="First",
        states=[
            _wait("First", next="Route"),
            ChoiceState(
                name="Route",
                rules=[ChoiceRule(conditions=[StringEquals(variable="$.eventName", value="Paid")], next="Done")],
                default="Refund",
            ),
            SucceedState(name="Done"),
            TaskState(name="Refund", activity="refund"),
        ],
    )

    with pytest.raises(DefinitionValidationError):
        validate_definition(graph)


def test_transition_to_unknown_state_is_rejected() -> None:
    graph = StateGraph(start_at="First", states=[_wait("First", next="Nowhere")])

    with pytest.raises(DefinitionValidationError):
        find_reachable_states(graph)


def test_missing_start_state_is_rejected() -> None:
    graph = StateGraph(start_at="Missing", states=[_wait("First")])

    with pytest.raises(DefinitionValidationError):
        validate_definition(graph)


def test_cycles_are_walked_once() -> None:
    graph = StateGraph(
        start_at="Ready",
        states=[
            _wait("Ready", next="OnSale"),
            _wait("OnSale", next="Ready"),
        ],
    )

    assert len(validate_definition(graph)) == 2
