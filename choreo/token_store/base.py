"""Token store contract and the correlation record it persists."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Protocol

DEFAULT_BRANCH_KEY = "Default"


@dataclass(frozen=True)
class CorrelationRecord:
    """Maps ``(entity_id, branch_key)`` to a resumption token.

    ``execution_id`` is only carried by the record whose branch key is
    :data:`DEFAULT_BRANCH_KEY`; it is the abort target for the whole
    execution.
    """

    entity_id: str
    branch_key: str
    token: Optional[str] = None
    execution_id: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.entity_id, self.branch_key)

    @property
    def is_default(self) -> bool:
        return self.branch_key == DEFAULT_BRANCH_KEY

    def merged_into(self, existing: Optional["CorrelationRecord"]) -> "CorrelationRecord":
        """Return the record stored after upserting ``self`` over ``existing``.

        Attributes left as ``None`` keep the value already stored.
        """

        if existing is None:
            return self
        return replace(
            existing,
            token=self.token if self.token is not None else existing.token,
            execution_id=self.execution_id if self.execution_id is not None else existing.execution_id,
        )


class TokenStore(Protocol):
    """Keyed storage for correlation records."""

    def get(self, entity_id: str) -> List[CorrelationRecord]:
        """Return every record for ``entity_id`` in no particular order."""
        ...

    def put(self, record: CorrelationRecord) -> None:
        """Upsert ``record`` by key, keeping stored attributes it leaves unset."""
        ...

    def delete(self, entity_id: str, branch_key: str) -> None:
        """Remove one record; removing a missing key is a no-op."""
        ...
