from __future__ import annotations

import pytest
from pydantic import ValidationError

from choreo.events_engine.matcher import EventMatcher, match_pattern
from choreo.events_engine.schemas import EventEnvelope


def _document(**detail):
    return {"source": "car", "detail-type": "Car Priced", "detail": detail}


def test_literal_lists_match_any_value() -> None:
    assert match_pattern({"source": ["order", "car"]}, _document())
    assert not match_pattern({"source": ["order"]}, _document())


def test_anything_but_excludes_values() -> None:
    assert match_pattern({"detail-type": [{"anything-but": "Car Announced"}]}, _document())
    assert not match_pattern({"detail-type": [{"anything-but": ["Car Priced", "Car Sold"]}]}, _document())


def test_prefix_and_exists_operators() -> None:
    assert match_pattern({"detail-type": [{"prefix": "Car "}]}, _document())
    assert match_pattern({"detail": {"price": [{"exists": True}]}}, _document(price=100))
    assert match_pattern({"detail": {"price": [{"exists": False}]}}, _document())
    assert not match_pattern({"detail": {"price": [{"exists": True}]}}, _document())


def test_nested_objects_match_nested_fields() -> None:
    assert match_pattern({"detail": {"result": ["Success"]}}, _document(result="Success"))
    assert not match_pattern({"detail": {"result": ["Success"]}}, _document(result="Rejected"))
    assert not match_pattern({"metadata": {"region": ["eu"]}}, _document())


@pytest.mark.parametrize("pattern", [{"source": "car"}, {"source": []}, {"source": [{"suffix": "r"}]}])
def test_invalid_patterns_are_rejected(pattern) -> None:
    with pytest.raises(ValidationError):
        EventMatcher(pattern=pattern)


def test_matcher_resolves_entity_id_from_envelope() -> None:
    matcher = EventMatcher(pattern={"source": ["car"]})
    envelope = EventEnvelope(source="car", detail_type="Car Priced", detail={"id": 42})

    assert matcher.matches(envelope)
    assert matcher.entity_id(envelope) == "42"
    assert matcher.entity_id(EventEnvelope(source="car", detail_type="Car Priced")) is None


def test_envelope_accepts_bus_shaped_documents() -> None:
    envelope = EventEnvelope.model_validate(
        {"source": "order", "detail-type": "Order Placed", "detail": {"id": "order-1"}, "time": "2024-05-01T10:00:00"}
    )

    document = envelope.to_event_document()

    assert document["detail-type"] == "Order Placed"
    assert document["time"].startswith("2024-05-01T10:00:00")
    assert envelope.time.tzinfo is not None
