"""Order processing for a marketplace forwarding requests to service providers.

1. Order Placed starts the journey; the order waits for confirmation.
2. Order Confirmed forwards the request; the order waits for the provider.
3. Order Accepted: the provider delivers and acknowledges with Order Delivered.
4. Order Rejected: the marketplace cancels with Order Canceled.
"""

from __future__ import annotations

from datetime import timedelta

from choreo.definition.builder import ChoreographyStateBuilder
from choreo.definition.choreography import Choreography
from choreo.definition.states import ChoiceRule, ChoiceState, FailState, StateGraph, StringEquals, SucceedState
from choreo.events_engine.matcher import EventMatcher

ORDER_SOURCE = "order"
ORDER_PLACED = "Order Placed"


def _on(event_name: str, target: str) -> ChoiceRule:
    return ChoiceRule(conditions=[StringEquals(variable="$.eventName", value=event_name)], next=target)


def order_definition(builder: ChoreographyStateBuilder) -> StateGraph:
    unexpected = "UnexpectedTransition"
    return StateGraph(
        start_at="WaitForConfirmation",
        states=[
            builder.with_name("WaitForConfirmation").build(next="Confirmed?"),
            ChoiceState(
                name="Confirmed?",
                rules=[_on("Order Confirmed", "WaitForServiceProviderAccept")],
                default=unexpected,
            ),
            builder.with_name("WaitForServiceProviderAccept").build(next="Accepted?"),
            ChoiceState(
                name="Accepted?",
                rules=[
                    _on("Order Accepted", "WaitForServiceProviderDelivery"),
                    _on("Order Rejected", "WaitForCanceled"),
                ],
                default=unexpected,
            ),
            builder.with_name("WaitForServiceProviderDelivery").build(next="Delivered?"),
            ChoiceState(
                name="Delivered?",
                rules=[
                    _on("Order Delivered", "OrderCompleted"),
                    _on("Order Canceled", "OrderCanceled"),
                ],
                default=unexpected,
            ),
            builder.with_name("WaitForCanceled").build(next="Canceled?"),
            ChoiceState(name="Canceled?", rules=[_on("Order Canceled", "OrderCanceled")], default=unexpected),
            SucceedState(name="OrderCompleted"),
            SucceedState(name="OrderCanceled"),
            FailState(name=unexpected, error="UnexpectedTransition"),
        ],
    )


def order_choreography(builder: ChoreographyStateBuilder) -> Choreography:
    return Choreography(
        name="Order",
        description="Marketplace order from placement to delivery or cancellation",
        definition=order_definition(builder),
        start_event=EventMatcher(pattern={"source": [ORDER_SOURCE], "detail-type": [ORDER_PLACED]}),
        events=(
            EventMatcher(pattern={"source": [ORDER_SOURCE], "detail-type": [{"anything-but": ORDER_PLACED}]}),
        ),
        timeout=timedelta(days=30),
    )
