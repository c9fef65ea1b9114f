"""Events Engine package: envelopes, matching, publishing and consumers."""

from .matcher import EventMatcher  # noqa: F401
from .schemas import EventEnvelope  # noqa: F401
