"""Process-local token store."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Dict, List

from choreo.token_store.base import CorrelationRecord, TokenStore


@dataclass
class InMemoryTokenStore(TokenStore):
    """Thread-safe in-memory store indexed by entity id."""

    def __post_init__(self) -> None:
        self._records: Dict[str, Dict[str, CorrelationRecord]] = {}
        self._lock = RLock()

    def get(self, entity_id: str) -> List[CorrelationRecord]:
        with self._lock:
            return list(self._records.get(entity_id, {}).values())

    def put(self, record: CorrelationRecord) -> None:
        with self._lock:
            branches = self._records.setdefault(record.entity_id, {})
            branches[record.branch_key] = record.merged_into(branches.get(record.branch_key))

    def delete(self, entity_id: str, branch_key: str) -> None:
        with self._lock:
            branches = self._records.get(entity_id)
            if not branches:
                return
            branches.pop(branch_key, None)
            if not branches:
                del self._records[entity_id]
