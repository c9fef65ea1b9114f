"""Temporal activities used by the choreography workflow."""

from __future__ import annotations

import logging
from typing import Any, Dict

from temporalio import activity

from choreo.token_store import CorrelationRecord, get_token_store
from choreo.workflow_orchestration.workflows.choreography import REGISTER_WAIT_ACTIVITY

LOGGER = logging.getLogger("choreo.workflow.activities")


@activity.defn(name=REGISTER_WAIT_ACTIVITY)
async def register_wait_activity(payload: Dict[str, Any]) -> None:
    """Upsert the correlation record of a wait-state that was just entered."""

    store = get_token_store(payload.get("token_table"))
    store.put(
        CorrelationRecord(
            entity_id=payload["entity_id"],
            branch_key=payload["branch_key"],
            token=payload["token"],
        )
    )
    LOGGER.info(
        "workflow_wait_registered",
        extra={"entity_id": payload["entity_id"], "branch_key": payload["branch_key"]},
    )
