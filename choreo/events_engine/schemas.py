"""Pydantic models describing bus events."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventEnvelope(BaseModel):
    """Canonical domain event as carried by the event bus.

    Serializes to the EventBridge shape (``detail-type`` rather than
    ``detail_type``) so matchers and entity id paths see the same document
    regardless of transport.
    """

    model_config = ConfigDict(populate_by_name=True)

    event_id: UUID = Field(default_factory=uuid4, alias="id")
    source: str = Field(..., min_length=1, max_length=256)
    detail_type: str = Field(..., min_length=1, max_length=128, alias="detail-type")
    detail: Dict[str, Any] = Field(default_factory=dict)
    time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC timestamp for when the originating action occurred.",
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("time")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_event_document(self) -> Dict[str, Any]:
        """Return the EventBridge-shaped document used for matching."""

        return self.model_dump(mode="json", by_alias=True)
