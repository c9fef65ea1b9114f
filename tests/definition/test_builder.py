from __future__ import annotations

import pytest

from choreo.definition import ChoreographyStateBuilder, WaitStateSpec, build_wait_state
from choreo.token_store import DEFAULT_BRANCH_KEY


def test_builder_is_reusable_without_leaking_previous_state() -> None:
    builder = ChoreographyStateBuilder(token_table="tokens", entity_id_path="$$.Execution.Input.entityId")

    clean = builder.with_name("Clean").with_event_name("Car Cleaned").build()
    ready = builder.with_name("ReadyForSale").build(next="Is On Sale?")

    assert clean.branch_key == "Car Cleaned"
    assert ready.name == "ReadyForSale"
    assert ready.branch_key == DEFAULT_BRANCH_KEY
    assert ready.next == "Is On Sale?"
    assert ready.entity_id_path == "$$.Execution.Input.entityId"
    assert ready.token_table == "tokens"
    assert builder.name is None


def test_with_entity_id_overrides_path_for_one_state() -> None:
    builder = ChoreographyStateBuilder(token_table="tokens")

    custom = builder.with_name("Custom").with_entity_id("$.detail.orderId").build()
    default = builder.with_name("Plain").build()

    assert custom.entity_id_path == "$.detail.orderId"
    assert default.entity_id_path == "$$.Execution.Input.detail.id"


def test_build_without_name_raises() -> None:
    with pytest.raises(ValueError):
        ChoreographyStateBuilder(token_table="tokens").build()


@pytest.mark.parametrize(
    "spec",
    [
        WaitStateSpec(name="", token_table="tokens"),
        WaitStateSpec(name="Wait", token_table="tokens", branch_key=""),
        WaitStateSpec(name="Wait", token_table="tokens", entity_id_path="detail.id"),
    ],
)
def test_build_wait_state_rejects_invalid_specs(spec: WaitStateSpec) -> None:
    with pytest.raises(ValueError):
        build_wait_state(spec)


def test_build_wait_state_is_pure() -> None:
    spec = WaitStateSpec(name="Announced", token_table="tokens", next="Is Accepted?")

    assert build_wait_state(spec) == build_wait_state(spec)
    assert build_wait_state(spec).type == "Wait"
