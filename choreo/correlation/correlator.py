"""Resolves inbound events to the suspended wait they resume."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from choreo.token_store.base import DEFAULT_BRANCH_KEY, CorrelationRecord, TokenStore
from choreo.workflow_engine.base import ChoreographyError, WorkflowEngine

LOGGER = logging.getLogger("choreo.correlation.correlator")


class MissingResumptionToken(ChoreographyError):
    """Raised when the only pending record has no token to resume yet."""


class CorrelationStoreCorrupted(ChoreographyError):
    """Raised when stored records break the one-record-per-branch invariants."""


class CorrelationOutcome(str, Enum):
    IGNORED = "ignored"
    RESUMED = "resumed"
    RESUMED_BRANCH = "resumed_branch"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CorrelationEvent:
    """Correlation id, discriminator and body of a domain event."""

    entity_id: str
    branch_key: str
    payload: Any = None


@dataclass(frozen=True)
class CorrelationResult:
    outcome: CorrelationOutcome
    entity_id: str
    branch_key: str
    execution_id: Optional[str] = None


class EventCorrelator:
    """Resumes the wait an event belongs to, or aborts its execution.

    With a single pending record the event resumes it whatever its branch
    key; telling event types apart is left to choice states in the
    definition. With several pending records (a parallel composition) only
    the record with the event's branch key is resumed and then deleted, and
    an event matching none of them aborts the execution named by the Default
    record.
    """

    def __init__(self, *, engine: WorkflowEngine, token_store: TokenStore) -> None:
        self._engine = engine
        self._token_store = token_store

    async def handle(self, event: CorrelationEvent) -> CorrelationResult:
        records = self._token_store.get(event.entity_id)

        if not records:
            LOGGER.warning(
                "correlation_no_pending_wait",
                extra={"entity_id": event.entity_id, "branch_key": event.branch_key},
            )
            return CorrelationResult(CorrelationOutcome.IGNORED, event.entity_id, event.branch_key)

        if len(records) == 1:
            return await self._resume_single(event, records[0])

        return await self._resolve_parallel(event, records)

    async def _resume_single(self, event: CorrelationEvent, record: CorrelationRecord) -> CorrelationResult:
        if not record.token:
            raise MissingResumptionToken(
                f"No resumption token stored for EntityId: {event.entity_id} ({record.branch_key})"
            )

        await self._engine.signal(record.token, event.payload)
        LOGGER.info(
            "correlation_single_wait_resumed",
            extra={
                "entity_id": event.entity_id,
                "branch_key": event.branch_key,
                "record_branch_key": record.branch_key,
            },
        )
        return CorrelationResult(
            CorrelationOutcome.RESUMED,
            event.entity_id,
            event.branch_key,
            execution_id=record.execution_id,
        )

    async def _resolve_parallel(
        self,
        event: CorrelationEvent,
        records: List[CorrelationRecord],
    ) -> CorrelationResult:
        by_branch: Dict[str, CorrelationRecord] = {}
        for record in records:
            if record.branch_key in by_branch:
                raise CorrelationStoreCorrupted(
                    f"Duplicate branch '{record.branch_key}' stored for EntityId: {event.entity_id}"
                )
            by_branch[record.branch_key] = record

        default = by_branch.get(DEFAULT_BRANCH_KEY)
        execution_id = default.execution_id if default else None
        match = by_branch.get(event.branch_key) if event.branch_key != DEFAULT_BRANCH_KEY else None

        if match is not None:
            if not match.token:
                raise MissingResumptionToken(
                    f"No resumption token stored for EntityId: {event.entity_id} ({match.branch_key})"
                )
            await self._engine.signal(match.token, event.payload)
            self._token_store.delete(event.entity_id, event.branch_key)
            LOGGER.info(
                "correlation_branch_resumed",
                extra={
                    "entity_id": event.entity_id,
                    "branch_key": event.branch_key,
                    "pending_branches": len(records) - 1,
                },
            )
            return CorrelationResult(
                CorrelationOutcome.RESUMED_BRANCH,
                event.entity_id,
                event.branch_key,
                execution_id=execution_id,
            )

        if not execution_id:
            raise CorrelationStoreCorrupted(
                f"No Default record with an execution id for EntityId: {event.entity_id}"
            )

        cause = f"Unexpected event {event.branch_key} for EntityId: {event.entity_id}."
        await self._engine.abort(execution_id, cause)
        LOGGER.warning(
            "correlation_unexpected_event_aborted",
            extra={
                "entity_id": event.entity_id,
                "branch_key": event.branch_key,
                "execution_id": execution_id,
                "pending_branches": sorted(key for key in by_branch if key != DEFAULT_BRANCH_KEY),
            },
        )
        return CorrelationResult(
            CorrelationOutcome.ABORTED,
            event.entity_id,
            event.branch_key,
            execution_id=execution_id,
        )
