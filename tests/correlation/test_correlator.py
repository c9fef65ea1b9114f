from __future__ import annotations

import pytest

from choreo.correlation import (
    CorrelationEvent,
    CorrelationOutcome,
    CorrelationStoreCorrupted,
    EventCorrelator,
    MissingResumptionToken,
)
from choreo.token_store import DEFAULT_BRANCH_KEY, CorrelationRecord


def _keys(store, entity_id):
    return sorted(record.branch_key for record in store.get(entity_id))


@pytest.fixture()
def correlator(workflow_engine, token_store) -> EventCorrelator:
    return EventCorrelator(engine=workflow_engine, token_store=token_store)


@pytest.fixture()
def car_in_preparation(token_store):
    token_store.put(CorrelationRecord("car-1", DEFAULT_BRANCH_KEY, token="T0", execution_id="exec-car-1"))
    for branch, token in (("Car Cleaned", "T-clean"), ("Car Repaired", "T-repair"), ("Car Priced", "T-price")):
        token_store.put(CorrelationRecord("car-1", branch, token=token))
    return token_store


@pytest.mark.asyncio
async def test_single_wait_resumes_on_any_event_and_keeps_record(correlator, workflow_engine, token_store) -> None:
    token_store.put(CorrelationRecord("order-1", DEFAULT_BRANCH_KEY, token="T1", execution_id="exec-order-1"))
    payload = {"eventName": "Order Confirmed", "detail": {"id": "order-1"}}

    result = await correlator.handle(CorrelationEvent("order-1", "Order Confirmed", payload))

    assert result.outcome is CorrelationOutcome.RESUMED
    assert result.execution_id == "exec-order-1"
    assert workflow_engine.signals == [("T1", payload)]
    assert workflow_engine.aborts == []
    assert _keys(token_store, "order-1") == [DEFAULT_BRANCH_KEY]


@pytest.mark.asyncio
@pytest.mark.parametrize("branch_key", ["Default", "Order Confirmed", "Something Else"])
async def test_single_wait_ignores_branch_key(correlator, workflow_engine, token_store, branch_key) -> None:
    token_store.put(CorrelationRecord("order-2", "Car Cleaned", token="T2"))

    result = await correlator.handle(CorrelationEvent("order-2", branch_key, {"n": 1}))

    assert result.outcome is CorrelationOutcome.RESUMED
    assert workflow_engine.signals == [("T2", {"n": 1})]
    assert len(token_store.get("order-2")) == 1


@pytest.mark.asyncio
async def test_parallel_match_resumes_and_deletes_branch(correlator, workflow_engine, car_in_preparation) -> None:
    result = await correlator.handle(CorrelationEvent("car-1", "Car Repaired", {"eventName": "Car Repaired"}))

    assert result.outcome is CorrelationOutcome.RESUMED_BRANCH
    assert workflow_engine.signals == [("T-repair", {"eventName": "Car Repaired"})]
    assert workflow_engine.aborts == []
    assert _keys(car_in_preparation, "car-1") == ["Car Cleaned", "Car Priced", DEFAULT_BRANCH_KEY]


@pytest.mark.asyncio
async def test_parallel_unmatched_event_aborts_without_deleting(correlator, workflow_engine, car_in_preparation) -> None:
    result = await correlator.handle(CorrelationEvent("car-1", "Car Scratched", {}))

    assert result.outcome is CorrelationOutcome.ABORTED
    assert result.execution_id == "exec-car-1"
    assert workflow_engine.signals == []
    assert workflow_engine.aborts == [("exec-car-1", "Unexpected event Car Scratched for EntityId: car-1.")]
    assert len(car_in_preparation.get("car-1")) == 4


@pytest.mark.asyncio
async def test_parallel_default_event_is_not_a_branch_match(correlator, workflow_engine, car_in_preparation) -> None:
    result = await correlator.handle(CorrelationEvent("car-1", DEFAULT_BRANCH_KEY, {}))

    assert result.outcome is CorrelationOutcome.ABORTED
    assert workflow_engine.signals == []
    assert len(car_in_preparation.get("car-1")) == 4


@pytest.mark.asyncio
async def test_no_pending_records_is_acknowledged(correlator, workflow_engine) -> None:
    result = await correlator.handle(CorrelationEvent("unknown", "Order Confirmed", {}))

    assert result.outcome is CorrelationOutcome.IGNORED
    assert workflow_engine.calls == 0


@pytest.mark.asyncio
async def test_all_branches_complete_one_by_one(correlator, workflow_engine, car_in_preparation) -> None:
    for branch in ("Car Priced", "Car Cleaned"):
        result = await correlator.handle(CorrelationEvent("car-1", branch, {}))
        assert result.outcome is CorrelationOutcome.RESUMED_BRANCH

    result = await correlator.handle(CorrelationEvent("car-1", "Car Repaired", {}))

    # With only Default and one branch left this is still a parallel resolution.
    assert result.outcome is CorrelationOutcome.RESUMED_BRANCH
    assert [token for token, _ in workflow_engine.signals] == ["T-price", "T-clean", "T-repair"]
    assert _keys(car_in_preparation, "car-1") == [DEFAULT_BRANCH_KEY]


@pytest.mark.asyncio
async def test_single_default_record_without_token_raises(correlator, workflow_engine, token_store) -> None:
    token_store.put(CorrelationRecord("order-3", DEFAULT_BRANCH_KEY, execution_id="exec-3"))

    with pytest.raises(MissingResumptionToken):
        await correlator.handle(CorrelationEvent("order-3", "Order Confirmed", {}))

    assert workflow_engine.calls == 0


@pytest.mark.asyncio
async def test_parallel_without_default_record_is_corrupted(correlator, workflow_engine, token_store) -> None:
    token_store.put(CorrelationRecord("car-2", "Car Cleaned", token="A"))
    token_store.put(CorrelationRecord("car-2", "Car Priced", token="B"))

    with pytest.raises(CorrelationStoreCorrupted):
        await correlator.handle(CorrelationEvent("car-2", "Car Sold", {}))

    assert workflow_engine.aborts == []


class _DuplicatingStore:
    def get(self, entity_id):
        return [
            CorrelationRecord(entity_id, DEFAULT_BRANCH_KEY, execution_id="exec"),
            CorrelationRecord(entity_id, "Car Cleaned", token="A"),
            CorrelationRecord(entity_id, "Car Cleaned", token="B"),
        ]

    def put(self, record):  # pragma: no cover - not reached
        raise AssertionError("unexpected put")

    def delete(self, entity_id, branch_key):  # pragma: no cover - not reached
        raise AssertionError("unexpected delete")


@pytest.mark.asyncio
async def test_duplicate_branch_keys_are_corrupted(workflow_engine) -> None:
    correlator = EventCorrelator(engine=workflow_engine, token_store=_DuplicatingStore())

    with pytest.raises(CorrelationStoreCorrupted):
        await correlator.handle(CorrelationEvent("car-3", "Car Cleaned", {}))

    assert workflow_engine.calls == 0


class _FailingEngine:
    async def signal(self, token, payload):
        raise ConnectionError("engine unavailable")

    async def abort(self, execution_id, cause):
        raise ConnectionError("engine unavailable")


@pytest.mark.asyncio
async def test_engine_failure_propagates_and_keeps_branch(car_in_preparation) -> None:
    correlator = EventCorrelator(engine=_FailingEngine(), token_store=car_in_preparation)

    with pytest.raises(ConnectionError):
        await correlator.handle(CorrelationEvent("car-1", "Car Cleaned", {}))

    assert len(car_in_preparation.get("car-1")) == 4
