"""SQLAlchemy ORM models for the choreography service."""

from choreo.models.base import Base  # noqa: F401
from choreo.models.correlation_record import CorrelationRecordRow  # noqa: F401
