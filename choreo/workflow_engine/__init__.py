"""Workflow engine capability, choreography registry and initiator."""

from __future__ import annotations

__all__ = [
    "ChoreographyError",
    "ChoreographyRegistry",
    "ExecutionNotStarted",
    "UnknownChoreographyError",
    "WorkflowEngine",
    "WorkflowInitiator",
]

from .base import ChoreographyError, ExecutionNotStarted, WorkflowEngine  # noqa: E402
from .initiator import WorkflowInitiator  # noqa: E402
from .registry import ChoreographyRegistry, UnknownChoreographyError  # noqa: E402
