from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from polarhooks.contracts import event_types
from polarhooks.contracts.payloads import (
    CheckoutCreatedEvent,
    CustomerCreatedEvent,
    OrderCreatedEvent,
    SubscriptionCreatedEvent,
)
from polarhooks.core.models import WebhookEnvelope
from polarhooks.webhooks.dispatcher import DISPATCH_TABLE, dispatch
from polarhooks.webhooks.handler import LoggingWebhookHandler, WebhookEventHandler


class CapturingHandler(WebhookEventHandler):
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    async def on_checkout_created(self, data: CheckoutCreatedEvent) -> None:
        self.calls.append(("checkout", data))

    async def on_customer_created(self, data: CustomerCreatedEvent) -> None:
        self.calls.append(("customer", data))

    async def on_order_created(self, data: OrderCreatedEvent) -> None:
        self.calls.append(("order", data))

    async def on_subscription_created(self, data: SubscriptionCreatedEvent) -> None:
        self.calls.append(("subscription", data))

    async def on_unknown_event(self, type: str, data: dict) -> None:
        self.calls.append(("unknown", (type, data)))


def _env(type: str, data: dict) -> WebhookEnvelope:
    return WebhookEnvelope(
        type=type,
        data=data,
        event_id="evt_x",
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


TYPED_CASES = [
    (
        event_types.CHECKOUT_CREATED,
        {"id": "chk_1", "status": "created", "customer_id": "", "product_id": "prod_1", "success_url": "https://x"},
        "checkout",
        CheckoutCreatedEvent,
    ),
    (
        event_types.CUSTOMER_CREATED,
        {"id": "cus_1", "email": "e@x.com", "name": "N", "organization_id": "org_1"},
        "customer",
        CustomerCreatedEvent,
    ),
    (
        event_types.ORDER_CREATED,
        {"id": "ord_1", "customer_id": "cus_1", "product_id": "prod_1", "amount": 1000, "currency": "USD", "status": "paid"},
        "order",
        OrderCreatedEvent,
    ),
    (
        event_types.SUBSCRIPTION_CREATED,
        {"id": "sub_1", "status": "active", "customer_id": "cus_1", "product_id": "prod_1", "price_id": "price_1"},
        "subscription",
        SubscriptionCreatedEvent,
    ),
]


def test_dispatch_table_covers_supported_types() -> None:
    assert set(DISPATCH_TABLE) == set(event_types.SUPPORTED_EVENT_TYPES)


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type,data,kind,payload_cls", TYPED_CASES)
async def test_dispatch_invokes_exactly_the_typed_method(event_type, data, kind, payload_cls) -> None:
    handler = CapturingHandler()
    await dispatch(_env(event_type, data), handler)

    assert len(handler.calls) == 1
    got_kind, payload = handler.calls[0]
    assert got_kind == kind
    assert isinstance(payload, payload_cls)
    for key, value in data.items():
        assert getattr(payload, key) == value


@pytest.mark.asyncio
async def test_dispatch_customer_created_example() -> None:
    handler = CapturingHandler()
    await dispatch(_env("customer.created", {"id": "cus_123", "email": "a@b.com"}), handler)
    assert handler.calls[0][0] == "customer"
    assert handler.calls[0][1].id == "cus_123"


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ["unknown.type", "subscription.canceled", "ORDER.CREATED", "order.created "])
async def test_unknown_type_goes_to_catch_all_with_raw_data(event_type: str) -> None:
    handler = CapturingHandler()
    data = {"id": "x", "nested": {"k": [1, 2]}}
    await dispatch(_env(event_type, data), handler)

    assert handler.calls == [("unknown", (event_type, data))]
    assert handler.calls[0][1][1] is data


@pytest.mark.asyncio
async def test_malformed_data_for_known_type_falls_back_to_catch_all() -> None:
    handler = CapturingHandler()
    data = {"id": "ord_1", "amount": "a thousand"}
    await dispatch(_env(event_types.ORDER_CREATED, data), handler)

    assert handler.calls == [("unknown", (event_types.ORDER_CREATED, data))]


@pytest.mark.asyncio
async def test_dispatching_twice_invokes_handler_twice() -> None:
    handler = CapturingHandler()
    env = _env(event_types.ORDER_CREATED, {"id": "ord_1", "amount": 1})
    await dispatch(env, handler)
    await dispatch(env, handler)
    assert [k for k, _ in handler.calls] == ["order", "order"]
    assert handler.calls[0][1] == handler.calls[1][1]


@pytest.mark.asyncio
async def test_handler_exception_propagates() -> None:
    class Boom(WebhookEventHandler):
        async def on_order_created(self, data: OrderCreatedEvent) -> None:
            raise RuntimeError("db down")

    with pytest.raises(RuntimeError, match="db down"):
        await dispatch(_env(event_types.ORDER_CREATED, {"id": "ord_1"}), Boom())


@pytest.mark.asyncio
async def test_base_handler_is_a_no_op_for_every_event() -> None:
    handler = WebhookEventHandler()
    for event_type, data, _, _ in TYPED_CASES:
        await dispatch(_env(event_type, data), handler)
    await dispatch(_env("unknown.type", {}), handler)


@pytest.mark.asyncio
async def test_logging_handler_logs_each_event(caplog) -> None:
    handler = LoggingWebhookHandler()
    with caplog.at_level("INFO", logger="polarhooks.webhooks.handler"):
        await dispatch(_env(event_types.ORDER_CREATED, {"id": "ord_9", "amount": 5, "currency": "EUR"}), handler)
        await dispatch(_env("unknown.type", {}), handler)
    text = caplog.text
    assert "order.created: ord_9 amount=5 EUR" in text
    assert "unknown event: unknown.type" in text
