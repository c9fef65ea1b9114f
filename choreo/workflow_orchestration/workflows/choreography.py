"""Temporal workflow that runs a choreography state graph."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any, Dict, List

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ApplicationError

with workflow.unsafe.imports_passed_through():
    from choreo.core.paths import execution_context, resolve_path
    from choreo.definition.states import StateGraph, StateType, WaitState
    from choreo.workflow_orchestration.tokens import encode_execution_id, encode_token

CHOREOGRAPHY_WORKFLOW_NAME = "choreography"
RESUME_SIGNAL_NAME = "resume"
REGISTER_WAIT_ACTIVITY = "register_wait"
WAITING_STATES_QUERY = "waiting_states"


@workflow.defn(name=CHOREOGRAPHY_WORKFLOW_NAME)
class ChoreographyWorkflow:
    """
    Walks a choreography definition.

    Flow per state kind:
    - Wait: register a correlation record through an activity, then block
      until the ``resume`` signal carries the matching token
    - Task: run the named activity with the current data
    - Choice: move to the first rule that holds, else the default
    - Parallel: run every branch concurrently; output is the list of branch outputs
    - Pass / Succeed / Fail: replace data / finish / fail the execution
    """

    def __init__(self) -> None:
        self._pending: Dict[str, str] = {}
        self._resumed: Dict[str, Any] = {}

    @workflow.run
    async def run(self, request: Dict[str, Any]) -> Any:
        """
        Execute a choreography.

        Args:
            request: ``{"choreography": name, "definition": state graph, "input": payload}``

        Returns:
            Output of the last state
        """
        graph = StateGraph.model_validate(request["definition"])
        info = workflow.info()
        context = execution_context(
            execution_id=encode_execution_id(info.workflow_id, info.run_id),
            name=info.workflow_id,
            input_payload=request.get("input"),
        )
        return await self._run_graph(graph, request.get("input"), context)

    async def _run_graph(self, graph: StateGraph, data: Any, context: Dict[str, Any]) -> Any:
        current = graph.start_at
        while True:
            state = graph.get(current)
            if state is None:
                raise ApplicationError(f"State '{current}' is not defined", type="States.Runtime", non_retryable=True)

            kind = StateType(state.type)
            if kind is StateType.WAIT:
                data = await self._wait(state, data, context)
            elif kind is StateType.TASK:
                data = await workflow.execute_activity(
                    state.activity,
                    data,
                    start_to_close_timeout=timedelta(minutes=5),
                    retry_policy=RetryPolicy(maximum_attempts=3),
                )
            elif kind is StateType.CHOICE:
                target = state.choose(data, context)
                if target is None:
                    raise ApplicationError(
                        f"No choice rule matched in state {state.name}",
                        type="States.NoChoiceMatched",
                        non_retryable=True,
                    )
                current = target
                continue
            elif kind is StateType.PARALLEL:
                outputs = await asyncio.gather(
                    *(self._run_graph(branch, data, context) for branch in state.branches)
                )
                data = list(outputs)
            elif kind is StateType.PASS:
                if state.result is not None:
                    data = state.result
            elif kind is StateType.SUCCEED:
                return data
            elif kind is StateType.FAIL:
                raise ApplicationError(state.cause or state.error, type=state.error, non_retryable=True)

            if not state.next:
                return data
            current = state.next

    async def _wait(self, state: WaitState, data: Any, context: Dict[str, Any]) -> Any:
        entity_id = resolve_path(state.entity_id_path, data, context)
        if entity_id is None:
            raise ApplicationError(
                f"State {state.name} could not resolve {state.entity_id_path}",
                type="States.EntityIdMissing",
                non_retryable=True,
            )

        info = workflow.info()
        token = encode_token(info.workflow_id, info.run_id, workflow.uuid4().hex)
        self._pending[token] = state.name

        await workflow.execute_activity(
            REGISTER_WAIT_ACTIVITY,
            {
                "entity_id": str(entity_id),
                "branch_key": state.branch_key,
                "token": token,
                "token_table": state.token_table,
            },
            start_to_close_timeout=timedelta(minutes=1),
            retry_policy=RetryPolicy(maximum_attempts=5, initial_interval=timedelta(seconds=1)),
        )
        workflow.logger.info(f"State {state.name} waiting for {state.branch_key} on {entity_id}")

        await workflow.wait_condition(lambda: token in self._resumed)
        return self._resumed.pop(token)

    @workflow.signal(name=RESUME_SIGNAL_NAME)
    async def resume(self, signal: Dict[str, Any]) -> None:
        """
        Resume the wait that issued ``signal["token"]``.

        Tokens that were already used, or never issued by this run, are dropped.
        """
        token = signal.get("token")
        if token not in self._pending:
            workflow.logger.warning(f"Ignoring resume signal for unknown token {token}")
            return
        self._pending.pop(token)
        self._resumed[token] = signal.get("payload")

    @workflow.query(name=WAITING_STATES_QUERY)
    def waiting_states(self) -> List[str]:
        """Names of the wait-states currently blocked on an event."""
        return sorted(self._pending.values())
