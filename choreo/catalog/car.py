"""Car journey for a second hand car dealership.

A supplier announces a car, the dealer inspects it and, when the inspection
succeeds, prepares it: cleaning, repairing and pricing happen in any order
and all three must complete. The car then moves between ready, on sale and
reserved until it is sold, after which delivery and invoicing both have to
complete.
"""

from __future__ import annotations

from datetime import timedelta

from choreo.definition.builder import ChoreographyStateBuilder
from choreo.definition.choreography import Choreography
from choreo.definition.states import (
    ChoiceRule,
    ChoiceState,
    FailState,
    ParallelState,
    StateGraph,
    StringEquals,
    SucceedState,
)
from choreo.events_engine.matcher import EventMatcher

CAR_SOURCE = "car"
CAR_ANNOUNCED = "Car Announced"


def _is(variable: str, value: str) -> StringEquals:
    return StringEquals(variable=variable, value=value)


def _on(event_name: str, target: str) -> ChoiceRule:
    return ChoiceRule(conditions=[_is("$.eventName", event_name)], next=target)


def _branch(builder: ChoreographyStateBuilder, name: str, event_name: str) -> StateGraph:
    return StateGraph.chain(builder.with_name(name).with_event_name(event_name).build())


def car_definition(builder: ChoreographyStateBuilder) -> StateGraph:
    unexpected = "Unexpected Transition"
    return StateGraph(
        start_at="Announced",
        states=[
            builder.with_name("Announced").build(next="Is Accepted?"),
            ChoiceState(
                name="Is Accepted?",
                rules=[
                    ChoiceRule(
                        conditions=[_is("$.eventName", "Inspection Completed"), _is("$.detail.result", "Rejected")],
                        next="Rejected",
                    ),
                    ChoiceRule(
                        conditions=[_is("$.eventName", "Inspection Completed"), _is("$.detail.result", "Success")],
                        next="InPreparation",
                    ),
                ],
                default=unexpected,
            ),
            SucceedState(name="Rejected"),
            ParallelState(
                name="InPreparation",
                branches=[
                    _branch(builder, "Clean", "Car Cleaned"),
                    _branch(builder, "Repair", "Car Repaired"),
                    _branch(builder, "Evaluate", "Car Priced"),
                ],
                next="ReadyForSale",
            ),
            builder.with_name("ReadyForSale").build(next="Is On Sale?"),
            ChoiceState(name="Is On Sale?", rules=[_on("Car Published", "OnSale")], default=unexpected),
            builder.with_name("OnSale").build(next="Is Reserved?"),
            ChoiceState(
                name="Is Reserved?",
                rules=[_on("Car Unpublished", "ReadyForSale"), _on("Car Reserved", "Reserved")],
                default=unexpected,
            ),
            builder.with_name("Reserved").build(next="Is Sold?"),
            ChoiceState(
                name="Is Sold?",
                rules=[_on("Car Unreserved", "OnSale"), _on("Car Sold", "Sold")],
                default=unexpected,
            ),
            ParallelState(
                name="Sold",
                branches=[
                    _branch(builder, "Delivery", "Car Delivered"),
                    _branch(builder, "Invoice", "Invoice Sent"),
                ],
            ),
            FailState(name=unexpected, error="UnexpectedTransition"),
        ],
    )


def car_choreography(builder: ChoreographyStateBuilder) -> Choreography:
    return Choreography(
        name="Car",
        description="Second hand car from announcement to sale",
        definition=car_definition(builder),
        start_event=EventMatcher(pattern={"source": [CAR_SOURCE], "detail-type": [CAR_ANNOUNCED]}),
        events=(
            EventMatcher(pattern={"source": [CAR_SOURCE], "detail-type": [{"anything-but": CAR_ANNOUNCED}]}),
        ),
        timeout=timedelta(days=90),
    )
