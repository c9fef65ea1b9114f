"""Correlation record storage keyed by ``(entity_id, branch_key)``."""

from __future__ import annotations

from typing import Dict, Optional

from choreo.core.config import AppSettings, get_settings
from choreo.token_store.base import DEFAULT_BRANCH_KEY, CorrelationRecord, TokenStore
from choreo.token_store.memory import InMemoryTokenStore

__all__ = [
    "DEFAULT_BRANCH_KEY",
    "CorrelationRecord",
    "InMemoryTokenStore",
    "TokenStore",
    "get_token_store",
    "set_token_store",
]

_stores: Dict[str, TokenStore] = {}


def _build_store(settings: AppSettings, table_name: str) -> TokenStore:
    if settings.token_store_backend == "dynamodb":
        from choreo.token_store.dynamodb import DynamoDBTokenStore

        return DynamoDBTokenStore(table_name=table_name, region_name=settings.aws_region)
    if settings.token_store_backend == "sql":
        from choreo.token_store.sql import SqlTokenStore

        return SqlTokenStore()
    return InMemoryTokenStore()


def get_token_store(table_name: Optional[str] = None) -> TokenStore:
    """Return the process-wide store for ``table_name`` (defaults to the configured table)."""

    settings = get_settings()
    name = table_name or settings.token_table_name
    store = _stores.get(name)
    if store is None:
        store = _build_store(settings, name)
        _stores[name] = store
    return store


def set_token_store(store: Optional[TokenStore], table_name: Optional[str] = None) -> None:
    """Override the cached store for a table (primarily for tests)."""

    name = table_name or get_settings().token_table_name
    if store is None:
        _stores.pop(name, None)
    else:
        _stores[name] = store
