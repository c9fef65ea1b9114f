from __future__ import annotations

from datetime import timedelta

import pytest

from choreo.catalog import sample_choreographies
from choreo.token_store import CorrelationRecord
from choreo.workflow_engine import ChoreographyRegistry, UnknownChoreographyError
from choreo.workflow_orchestration.activities import register_wait_activity
from choreo.workflow_orchestration.config import TemporalConfig
from choreo.workflow_orchestration.engine import TemporalWorkflowEngine
from choreo.workflow_orchestration.tokens import encode_token


class _FakeHandle:
    def __init__(self, workflow_id: str, run_id: str | None) -> None:
        self.id = workflow_id
        self.first_execution_run_id = run_id
        self.result_run_id = run_id
        self.signals = []
        self.terminations = []

    async def signal(self, name, arg):
        self.signals.append((name, arg))

    async def terminate(self, *, reason=None):
        self.terminations.append(reason)


class _FakeClient:
    def __init__(self, run_id: str | None = "run-1") -> None:
        self.run_id = run_id
        self.started = []
        self.handles = {}

    async def start_workflow(self, workflow, arg, *, id, task_queue, execution_timeout=None):
        self.started.append(
            {"workflow": workflow, "arg": arg, "id": id, "task_queue": task_queue, "timeout": execution_timeout}
        )
        return _FakeHandle(id, self.run_id)

    def get_workflow_handle(self, workflow_id, *, run_id=None):
        return self.handles.setdefault((workflow_id, run_id), _FakeHandle(workflow_id, run_id))


def _engine(client: _FakeClient) -> TemporalWorkflowEngine:
    registry = ChoreographyRegistry()
    for choreography in sample_choreographies(token_table="tokens"):
        registry.register(choreography)
    config = TemporalConfig(host="localhost:7233", namespace="default", api_key=None, task_queue="choreo-test", tls_enabled=False)
    return TemporalWorkflowEngine(config=config, registry_provider=lambda: registry, client=client)


@pytest.mark.asyncio
async def test_start_runs_interpreter_with_entity_as_workflow_id() -> None:
    client = _FakeClient()

    execution_id = await _engine(client).start("order-1", "Order", {"entityId": "order-1"})

    assert execution_id == "order-1:run-1"
    started = client.started[0]
    assert started["workflow"] == "choreography"
    assert started["id"] == "order-1"
    assert started["task_queue"] == "choreo-test"
    assert started["timeout"] == timedelta(days=30)
    assert started["arg"]["choreography"] == "Order"
    assert started["arg"]["definition"]["start_at"] == "WaitForConfirmation"
    assert started["arg"]["input"] == {"entityId": "order-1"}


@pytest.mark.asyncio
async def test_start_without_run_id_returns_none() -> None:
    assert await _engine(_FakeClient(run_id=None)).start("order-1", "Order", {}) is None


@pytest.mark.asyncio
async def test_start_unknown_choreography_raises() -> None:
    client = _FakeClient()

    with pytest.raises(UnknownChoreographyError):
        await _engine(client).start("x-1", "Missing", {})

    assert client.started == []


@pytest.mark.asyncio
async def test_signal_targets_run_encoded_in_token() -> None:
    client = _FakeClient()
    token = encode_token("car-1", "run-7", "nonce")

    await _engine(client).signal(token, {"eventName": "Car Cleaned"})

    handle = client.handles[("car-1", "run-7")]
    assert handle.signals == [("resume", {"token": token, "payload": {"eventName": "Car Cleaned"}})]


@pytest.mark.asyncio
async def test_abort_terminates_with_cause() -> None:
    client = _FakeClient()

    await _engine(client).abort("car-1:run-7", "Unexpected event Car Scratched for EntityId: car-1.")

    handle = client.handles[("car-1", "run-7")]
    assert handle.terminations == ["Unexpected event Car Scratched for EntityId: car-1."]


@pytest.mark.asyncio
async def test_register_wait_activity_upserts_record(token_store) -> None:
    await register_wait_activity(
        {"entity_id": "car-1", "branch_key": "Car Cleaned", "token": "car-1:run-1:n", "token_table": None}
    )

    assert token_store.get("car-1") == [CorrelationRecord("car-1", "Car Cleaned", token="car-1:run-1:n")]
