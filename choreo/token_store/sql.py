"""SQLAlchemy-backed token store."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from choreo.models.correlation_record import CorrelationRecordRow
from choreo.token_store.base import CorrelationRecord, TokenStore

LOGGER = logging.getLogger("choreo.token_store.sql")

SessionFactory = Callable[[], AbstractContextManager[Session]]

# Dialects whose INSERT supports ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlTokenStore(TokenStore):
    """Stores correlation records in the ``correlation_records`` table.

    Each operation runs in its own transaction; there are no multi-key
    guarantees. ``put`` merges atomically: concurrent writers of the same key
    both land in one row.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        if session_factory is None:
            from choreo.core.database import session_scope

            session_factory = session_scope
        self._session_factory = session_factory

    def get(self, entity_id: str) -> List[CorrelationRecord]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(CorrelationRecordRow).where(CorrelationRecordRow.entity_id == entity_id)
            ).all()
            return [_to_record(row) for row in rows]

    def put(self, record: CorrelationRecord) -> None:
        try:
            self._write(record)
        except IntegrityError:
            # Another writer inserted the key between our read and insert; the row exists now.
            LOGGER.info(
                "token_store_put_conflict_retried",
                extra={"entity_id": record.entity_id, "branch_key": record.branch_key},
            )
            self._write(record)

        LOGGER.debug(
            "token_store_record_saved",
            extra={"entity_id": record.entity_id, "branch_key": record.branch_key},
        )

    def _write(self, record: CorrelationRecord) -> None:
        with self._session_factory() as session:
            insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
            if insert is not None:
                session.execute(_upsert_statement(insert, record))
                return

            row = session.get(CorrelationRecordRow, record.key)
            if row is None:
                session.add(
                    CorrelationRecordRow(
                        entity_id=record.entity_id,
                        branch_key=record.branch_key,
                        token=record.token,
                        execution_id=record.execution_id,
                    )
                )
            else:
                merged = record.merged_into(_to_record(row))
                row.token = merged.token
                row.execution_id = merged.execution_id
            session.flush()

    def delete(self, entity_id: str, branch_key: str) -> None:
        with self._session_factory() as session:
            session.execute(
                delete(CorrelationRecordRow)
                .where(CorrelationRecordRow.entity_id == entity_id)
                .where(CorrelationRecordRow.branch_key == branch_key)
            )


def _upsert_statement(insert, record: CorrelationRecord):
    statement = insert(CorrelationRecordRow).values(
        entity_id=record.entity_id,
        branch_key=record.branch_key,
        token=record.token,
        execution_id=record.execution_id,
    )
    # Attributes the record leaves unset keep the stored value.
    return statement.on_conflict_do_update(
        index_elements=[CorrelationRecordRow.entity_id, CorrelationRecordRow.branch_key],
        set_={
            "token": func.coalesce(statement.excluded.token, CorrelationRecordRow.token),
            "execution_id": func.coalesce(statement.excluded.execution_id, CorrelationRecordRow.execution_id),
            "updated_at": func.now(),
        },
    )


def _to_record(row: CorrelationRecordRow) -> CorrelationRecord:
    return CorrelationRecord(
        entity_id=row.entity_id,
        branch_key=row.branch_key,
        token=row.token,
        execution_id=row.execution_id,
    )
