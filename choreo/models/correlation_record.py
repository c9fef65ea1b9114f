"""Persisted correlation records backing the SQL token store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from choreo.models.base import Base, TimestampMixin


class CorrelationRecordRow(TimestampMixin, Base):
    """Maps an (entity, branch) pair to the token that resumes it."""

    __tablename__ = "correlation_records"

    entity_id: Mapped[str] = mapped_column(String(length=255), primary_key=True)
    branch_key: Mapped[str] = mapped_column(String(length=255), primary_key=True)
    token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    execution_id: Mapped[Optional[str]] = mapped_column(String(length=1024), nullable=True)
