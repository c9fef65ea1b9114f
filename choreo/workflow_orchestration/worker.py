"""Temporal worker bootstrap."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from temporalio.worker import Worker

from choreo.workflow_orchestration.activities import register_wait_activity
from choreo.workflow_orchestration.client import get_temporal_client
from choreo.workflow_orchestration.config import get_temporal_config
from choreo.workflow_orchestration.workflows import ChoreographyWorkflow

logger = logging.getLogger(__name__)


async def run_worker(extra_activities: Sequence[Any] = ()) -> None:
    """Run the Temporal worker for choreography workflows.

    ``extra_activities`` are registered next to the built-in ones so Task
    states in a definition have something to call.
    """
    config = get_temporal_config()
    if not config.enabled:
        logger.error("Temporal service is not configured properly")
        logger.error("Please set CHOREO_TEMPORAL_HOST and CHOREO_TEMPORAL_NAMESPACE")
        raise RuntimeError("Temporal service is not configured")

    logger.info("Connecting to Temporal: %s", config.host)
    logger.info("Namespace: %s", config.namespace)
    logger.info("Task Queue: %s", config.task_queue)

    client = await get_temporal_client(config)

    activities = [register_wait_activity, *extra_activities]
    worker = Worker(
        client,
        task_queue=config.task_queue,
        workflows=[ChoreographyWorkflow],
        activities=activities,
    )

    logger.info("Worker created with %s activities", len(activities))
    await worker.run()


if __name__ == "__main__":
    asyncio.run(run_worker())
