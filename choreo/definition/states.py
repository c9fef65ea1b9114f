"""State graph model for choreography definitions.

States form a closed tagged union discriminated by ``type``. Only ``Wait``
states carry correlation data (``entity_id_path`` and ``branch_key``).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from choreo.core.paths import resolve_path
from choreo.token_store.base import DEFAULT_BRANCH_KEY


class StateType(str, Enum):
    """Kinds of state a definition may contain."""

    WAIT = "Wait"
    TASK = "Task"
    CHOICE = "Choice"
    PARALLEL = "Parallel"
    PASS = "Pass"
    SUCCEED = "Succeed"
    FAIL = "Fail"


TASK_STATE_TYPES = frozenset({StateType.WAIT, StateType.TASK})


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=80)

    def transitions(self) -> List[str]:
        """Names of the states this state can move to."""

        return []


class _ChainedState(_State):
    next: Optional[str] = None

    def transitions(self) -> List[str]:
        return [self.next] if self.next else []


class WaitState(_ChainedState):
    """Suspends the execution until an external event resumes it."""

    type: Literal["Wait"] = "Wait"
    entity_id_path: str
    branch_key: str = DEFAULT_BRANCH_KEY
    token_table: Optional[str] = None


class TaskState(_ChainedState):
    """Runs a named engine activity with the current data."""

    type: Literal["Task"] = "Task"
    activity: str


class StringEquals(BaseModel):
    model_config = ConfigDict(frozen=True)

    variable: str
    value: str

    def holds(self, data: Any, context: Any = None) -> bool:
        return resolve_path(self.variable, data, context) == self.value


class ChoiceRule(BaseModel):
    """Moves to ``next`` when every condition holds."""

    model_config = ConfigDict(frozen=True)

    conditions: List[StringEquals] = Field(..., min_length=1)
    next: str

    def holds(self, data: Any, context: Any = None) -> bool:
        return all(condition.holds(data, context) for condition in self.conditions)


class ChoiceState(_State):
    type: Literal["Choice"] = "Choice"
    rules: List[ChoiceRule] = Field(default_factory=list)
    default: Optional[str] = None

    def transitions(self) -> List[str]:
        targets = [rule.next for rule in self.rules]
        if self.default:
            targets.append(self.default)
        return targets

    def choose(self, data: Any, context: Any = None) -> Optional[str]:
        """Return the target of the first rule that holds, else the default."""

        for rule in self.rules:
            if rule.holds(data, context):
                return rule.next
        return self.default


class ParallelState(_ChainedState):
    type: Literal["Parallel"] = "Parallel"
    branches: List["StateGraph"] = Field(..., min_length=1)


class PassState(_ChainedState):
    type: Literal["Pass"] = "Pass"
    result: Optional[Dict[str, Any]] = None


class SucceedState(_State):
    type: Literal["Succeed"] = "Succeed"


class FailState(_State):
    type: Literal["Fail"] = "Fail"
    error: str = "States.Fail"
    cause: Optional[str] = None


State = Annotated[
    Union[WaitState, TaskState, ChoiceState, ParallelState, PassState, SucceedState, FailState],
    Field(discriminator="type"),
]


class StateGraph(BaseModel):
    """A set of named states and the one execution starts at."""

    model_config = ConfigDict(frozen=True)

    start_at: str
    states: List[State] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_names(self) -> "StateGraph":
        seen: set[str] = set()
        for state in self.states:
            if state.name in seen:
                raise ValueError(f"Duplicate state name '{state.name}'")
            seen.add(state.name)
        return self

    def get(self, name: str) -> Optional[State]:
        for state in self.states:
            if state.name == name:
                return state
        return None

    @classmethod
    def chain(cls, *states: State) -> "StateGraph":
        """Build a graph from states in order, linking each to the next.

        States that already declare a transition keep it.
        """

        linked: List[State] = []
        for index, state in enumerate(states):
            following = states[index + 1].name if index + 1 < len(states) else None
            if following and isinstance(state, _ChainedState) and state.next is None:
                state = state.model_copy(update={"next": following})
            linked.append(state)
        return cls(start_at=states[0].name, states=linked)


ParallelState.model_rebuild()
StateGraph.model_rebuild()
