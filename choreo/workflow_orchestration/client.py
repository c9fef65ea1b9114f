"""Temporal client factory."""

from __future__ import annotations

import logging

from temporalio.client import Client

from choreo.workflow_orchestration.config import TemporalConfig, get_temporal_config

logger = logging.getLogger("choreo.workflow.client")


async def get_temporal_client(config: TemporalConfig | None = None) -> Client:
    """Connect to the Temporal namespace that runs choreography workflows."""

    config = config or get_temporal_config()
    if not config.enabled:
        raise RuntimeError("CHOREO_TEMPORAL_HOST and CHOREO_TEMPORAL_NAMESPACE must be configured")

    logger.info(
        "temporal_client_connecting",
        extra={
            "host": config.host,
            "namespace": config.namespace,
            "task_queue": config.task_queue,
            "api_key_configured": bool(config.api_key),
        },
    )
    return await Client.connect(config.host, **config.connect_options())
