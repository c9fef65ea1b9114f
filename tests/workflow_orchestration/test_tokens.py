from __future__ import annotations

import pytest

from choreo.workflow_orchestration.tokens import (
    InvalidTokenError,
    decode_execution_id,
    decode_token,
    encode_execution_id,
    encode_token,
)


def test_entity_ids_containing_separator_survive_decoding() -> None:
    token = encode_token("tenant:car-1", "run-9", "abc123")

    ref = decode_token(token)

    assert (ref.workflow_id, ref.run_id, ref.nonce) == ("tenant:car-1", "run-9", "abc123")
    assert decode_execution_id(encode_execution_id("tenant:car-1", "run-9")) == ("tenant:car-1", "run-9")


@pytest.mark.parametrize("value", ["no-separators", "wf::nonce", ":run:nonce"])
def test_malformed_tokens_are_rejected(value: str) -> None:
    with pytest.raises(InvalidTokenError):
        decode_token(value)


def test_malformed_execution_id_is_rejected() -> None:
    with pytest.raises(InvalidTokenError):
        decode_execution_id("car-1")
