"""Encoding of Temporal execution ids and wait-state resumption tokens.

An execution id is ``"{workflow_id}:{run_id}"`` and a token is
``"{workflow_id}:{run_id}:{nonce}"``. Workflow ids are entity ids and may
contain ``:``; run ids and nonces never do, so both are split from the right.
"""

from __future__ import annotations

from typing import NamedTuple

SEPARATOR = ":"


class InvalidTokenError(ValueError):
    """Raised when a token or execution id cannot be decoded."""


class ExecutionRef(NamedTuple):
    workflow_id: str
    run_id: str


class TokenRef(NamedTuple):
    workflow_id: str
    run_id: str
    nonce: str


def encode_execution_id(workflow_id: str, run_id: str) -> str:
    return SEPARATOR.join((workflow_id, run_id))


def decode_execution_id(execution_id: str) -> ExecutionRef:
    parts = execution_id.rsplit(SEPARATOR, 1)
    if len(parts) != 2 or not all(parts):
        raise InvalidTokenError(f"Malformed execution id '{execution_id}'")
    return ExecutionRef(*parts)


def encode_token(workflow_id: str, run_id: str, nonce: str) -> str:
    return SEPARATOR.join((workflow_id, run_id, nonce))


def decode_token(token: str) -> TokenRef:
    parts = token.rsplit(SEPARATOR, 2)
    if len(parts) != 3 or not all(parts):
        raise InvalidTokenError(f"Malformed resumption token '{token}'")
    return TokenRef(*parts)
