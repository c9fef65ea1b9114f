"""Workflow engine capability backed by Temporal."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from temporalio.client import Client, WorkflowHandle

from choreo.workflow_engine.base import WorkflowEngine
from choreo.workflow_engine.registry import ChoreographyRegistry, get_choreography_registry
from choreo.workflow_orchestration.client import get_temporal_client
from choreo.workflow_orchestration.config import TemporalConfig, get_temporal_config
from choreo.workflow_orchestration.tokens import decode_execution_id, decode_token, encode_execution_id
from choreo.workflow_orchestration.workflows.choreography import (
    CHOREOGRAPHY_WORKFLOW_NAME,
    RESUME_SIGNAL_NAME,
)

logger = logging.getLogger("choreo.workflow.temporal_engine")


class TemporalWorkflowEngine(WorkflowEngine):
    """Runs choreographies as ``choreography`` workflows on Temporal.

    Executions use the entity id as workflow id, so Temporal itself refuses
    a second running execution for the same entity.
    """

    def __init__(
        self,
        *,
        config: Optional[TemporalConfig] = None,
        registry_provider: Callable[[], ChoreographyRegistry] = get_choreography_registry,
        client: Optional[Client] = None,
    ) -> None:
        self._config = config or get_temporal_config()
        self._registry_provider = registry_provider
        self._client = client

    async def _get_client(self) -> Client:
        """Get or create Temporal client."""
        if self._client is None:
            self._client = await get_temporal_client(self._config)
        return self._client

    async def start(self, name: str, definition_id: str, input_payload: Any) -> Optional[str]:
        choreography = self._registry_provider().require(definition_id)
        client = await self._get_client()

        handle: WorkflowHandle = await client.start_workflow(
            CHOREOGRAPHY_WORKFLOW_NAME,
            {
                "choreography": choreography.name,
                "definition": choreography.definition.model_dump(mode="json"),
                "input": input_payload,
            },
            id=name,
            task_queue=self._config.task_queue,
            execution_timeout=choreography.timeout,
        )

        run_id = handle.first_execution_run_id or handle.result_run_id
        if not run_id:
            logger.warning(
                "temporal_start_returned_no_run_id",
                extra={"workflow_id": handle.id, "choreography": definition_id},
            )
            return None

        logger.info(
            "temporal_workflow_started",
            extra={"workflow_id": handle.id, "run_id": run_id, "choreography": definition_id},
        )
        return encode_execution_id(handle.id, run_id)

    async def signal(self, token: str, payload: Any) -> None:
        ref = decode_token(token)
        client = await self._get_client()
        handle = client.get_workflow_handle(ref.workflow_id, run_id=ref.run_id)
        await handle.signal(RESUME_SIGNAL_NAME, {"token": token, "payload": payload})
        logger.info(
            "temporal_resume_signal_sent",
            extra={"workflow_id": ref.workflow_id, "run_id": ref.run_id},
        )

    async def abort(self, execution_id: str, cause: str) -> None:
        ref = decode_execution_id(execution_id)
        client = await self._get_client()
        handle = client.get_workflow_handle(ref.workflow_id, run_id=ref.run_id)
        await handle.terminate(reason=cause)
        logger.info(
            "temporal_workflow_terminated",
            extra={"workflow_id": ref.workflow_id, "run_id": ref.run_id, "cause": cause},
        )


# Singleton instance
_engine: Optional[TemporalWorkflowEngine] = None


def get_workflow_engine() -> TemporalWorkflowEngine:
    """Get or create the Temporal workflow engine singleton."""
    global _engine
    if _engine is None:
        _engine = TemporalWorkflowEngine()
    return _engine
