"""Temporal-backed workflow engine, workflows, activities and worker."""

# Note: Don't import the engine at module level to avoid pulling SQLAlchemy
# models into the Temporal workflow sandbox. Import it explicitly when needed.


def __getattr__(name):
    """Lazy import to avoid loading SQLAlchemy in Temporal workflows."""
    if name == "get_workflow_engine":
        from choreo.workflow_orchestration.engine import get_workflow_engine
        return get_workflow_engine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["get_workflow_engine"]
