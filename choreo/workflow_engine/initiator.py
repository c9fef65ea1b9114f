"""Starts choreography executions and records their fallback correlation."""

from __future__ import annotations

import logging
from typing import Any

from choreo.token_store.base import DEFAULT_BRANCH_KEY, CorrelationRecord, TokenStore
from choreo.workflow_engine.base import ExecutionNotStarted, WorkflowEngine

LOGGER = logging.getLogger("choreo.workflow_engine.initiator")


class WorkflowInitiator:
    """Starts one execution per entity and writes its Default record."""

    def __init__(self, *, engine: WorkflowEngine, token_store: TokenStore) -> None:
        self._engine = engine
        self._token_store = token_store

    async def start(self, entity_id: str, definition_id: str, input_payload: Any) -> str:
        """Start ``definition_id`` for ``entity_id`` and return the execution id.

        The execution is named after the entity. The Default record is only
        written once the engine has returned an execution id; errors from the
        engine or the store are propagated unchanged.
        """

        try:
            execution_id = await self._engine.start(entity_id, definition_id, input_payload)
        except Exception:
            LOGGER.exception(
                "execution_start_failed",
                extra={"entity_id": entity_id, "definition_id": definition_id},
            )
            raise

        if not execution_id:
            LOGGER.error(
                "execution_id_missing",
                extra={"entity_id": entity_id, "definition_id": definition_id},
            )
            raise ExecutionNotStarted(entity_id, definition_id)

        self._token_store.put(
            CorrelationRecord(
                entity_id=entity_id,
                branch_key=DEFAULT_BRANCH_KEY,
                execution_id=execution_id,
            )
        )

        LOGGER.info(
            "execution_started",
            extra={
                "entity_id": entity_id,
                "definition_id": definition_id,
                "execution_id": execution_id,
            },
        )
        return execution_id
