"""Temporal workflow definitions."""

from choreo.workflow_orchestration.workflows.choreography import ChoreographyWorkflow  # noqa: F401
