"""Construction of choreography wait-states."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from choreo.core.paths import InvalidPathError, resolve_path
from choreo.definition.states import WaitState
from choreo.token_store.base import DEFAULT_BRANCH_KEY

DEFAULT_ENTITY_ID_PATH = "$$.Execution.Input.detail.id"


@dataclass(frozen=True)
class WaitStateSpec:
    """Everything needed to describe one wait-state."""

    name: str
    token_table: str
    entity_id_path: str = DEFAULT_ENTITY_ID_PATH
    branch_key: str = DEFAULT_BRANCH_KEY
    next: Optional[str] = None


def build_wait_state(spec: WaitStateSpec) -> WaitState:
    """Create the wait-state described by ``spec``."""

    if not spec.name:
        raise ValueError("A choreography state needs a name")
    if not spec.branch_key:
        raise ValueError(f"State '{spec.name}' has an empty event name")
    try:
        resolve_path(spec.entity_id_path, {}, {})
    except InvalidPathError as exc:
        raise ValueError(f"State '{spec.name}' has an invalid entity id path: {exc}") from exc

    return WaitState(
        name=spec.name,
        entity_id_path=spec.entity_id_path,
        branch_key=spec.branch_key,
        token_table=spec.token_table,
        next=spec.next,
    )


@dataclass(frozen=True)
class ChoreographyStateBuilder:
    """Fluent, immutable builder for wait-states.

    Every ``with_*`` call returns a new builder, so a builder configured once
    can be reused for any number of states::

        builder = ChoreographyStateBuilder(token_table="tokens")
        clean = builder.with_name("Clean").with_event_name("Car Cleaned").build()
        ready = builder.with_name("ReadyForSale").build()  # branch key "Default"
    """

    token_table: str
    entity_id_path: str = DEFAULT_ENTITY_ID_PATH
    name: Optional[str] = None
    branch_key: str = DEFAULT_BRANCH_KEY

    def with_name(self, name: str) -> "ChoreographyStateBuilder":
        return replace(self, name=name)

    def with_entity_id(self, entity_id_path: str) -> "ChoreographyStateBuilder":
        return replace(self, entity_id_path=entity_id_path)

    def with_event_name(self, branch_key: str) -> "ChoreographyStateBuilder":
        return replace(self, branch_key=branch_key)

    def spec(self, next: Optional[str] = None) -> WaitStateSpec:
        if not self.name:
            raise ValueError("Call with_name() before building a choreography state")
        return WaitStateSpec(
            name=self.name,
            token_table=self.token_table,
            entity_id_path=self.entity_id_path,
            branch_key=self.branch_key,
            next=next,
        )

    def build(self, next: Optional[str] = None) -> WaitState:
        return build_wait_state(self.spec(next))
