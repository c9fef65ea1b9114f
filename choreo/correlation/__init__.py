"""Event correlation: resume or abort suspended choreography executions."""

from .correlator import (  # noqa: F401
    CorrelationEvent,
    CorrelationOutcome,
    CorrelationResult,
    CorrelationStoreCorrupted,
    EventCorrelator,
    MissingResumptionToken,
)
