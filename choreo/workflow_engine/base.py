"""Capability surface the choreography core needs from a workflow engine."""

from __future__ import annotations

from typing import Any, Optional, Protocol


class ChoreographyError(RuntimeError):
    """Base class for choreography errors."""


class ExecutionNotStarted(ChoreographyError):
    """Raised when the engine accepted a start request but returned no execution id."""

    def __init__(self, entity_id: str, definition_id: str) -> None:
        super().__init__(f"Execution for entity '{entity_id}' of '{definition_id}' was not started")
        self.entity_id = entity_id
        self.definition_id = definition_id


class WorkflowEngine(Protocol):
    """Start, resume and abort workflow executions."""

    async def start(self, name: str, definition_id: str, input_payload: Any) -> Optional[str]:
        """Start an execution named ``name`` and return its execution id."""
        ...

    async def signal(self, token: str, payload: Any) -> None:
        """Resume the wait that issued ``token`` with ``payload`` as its output."""
        ...

    async def abort(self, execution_id: str, cause: str) -> None:
        """Stop the execution ``execution_id``, recording ``cause``."""
        ...
