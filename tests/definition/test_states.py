from __future__ import annotations

import pytest
from pydantic import ValidationError

from choreo.core.paths import InvalidPathError, execution_context, resolve_path
from choreo.definition.states import ChoiceRule, ChoiceState, StateGraph, StringEquals, SucceedState, WaitState


def test_state_graph_round_trips_through_json() -> None:
    graph = StateGraph(
        start_at="Wait",
        states=[
            WaitState(name="Wait", entity_id_path="$.id", branch_key="Car Sold", next="Done"),
            SucceedState(name="Done"),
        ],
    )

    restored = StateGraph.model_validate(graph.model_dump(mode="json"))

    assert restored == graph
    assert isinstance(restored.get("Wait"), WaitState)


def test_state_graph_rejects_duplicate_names() -> None:
    with pytest.raises(ValidationError):
        StateGraph(start_at="A", states=[SucceedState(name="A"), SucceedState(name="A")])


def test_choice_picks_first_matching_rule_then_default() -> None:
    choice = ChoiceState(
        name="Is Accepted?",
        rules=[
            ChoiceRule(
                conditions=[
                    StringEquals(variable="$.eventName", value="Inspection Completed"),
                    StringEquals(variable="$.detail.result", value="Rejected"),
                ],
                next="Rejected",
            ),
            ChoiceRule(conditions=[StringEquals(variable="$.eventName", value="Inspection Completed")], next="Prepare"),
        ],
        default="Unexpected",
    )

    rejected = {"eventName": "Inspection Completed", "detail": {"result": "Rejected"}}
    success = {"eventName": "Inspection Completed", "detail": {"result": "Success"}}

    assert choice.choose(rejected) == "Rejected"
    assert choice.choose(success) == "Prepare"
    assert choice.choose({"eventName": "Car Sold"}) == "Unexpected"
    assert choice.transitions() == ["Rejected", "Prepare", "Unexpected"]


def test_resolve_path_reads_data_and_context() -> None:
    context = execution_context(execution_id="car-1:run", name="car-1", input_payload={"detail": {"id": "car-1"}})
    data = {"items": [{"id": "a"}, {"id": "b"}]}

    assert resolve_path("$", data) is data
    assert resolve_path("$.items.1.id", data) == "b"
    assert resolve_path("$.items.5.id", data) is None
    assert resolve_path("$$.Execution.Input.detail.id", data, context) == "car-1"
    assert resolve_path("$$.Execution.Name", data, context) == "car-1"


@pytest.mark.parametrize("path", ["detail.id", "$.detail..id", "$.detail."])
def test_resolve_path_rejects_unsupported_forms(path: str) -> None:
    with pytest.raises(InvalidPathError):
        resolve_path(path, {})
