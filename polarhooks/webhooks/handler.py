"""Handler contract for webhook events.

Subclass `WebhookEventHandler` and override the methods for the events you care about;
every method defaults to a no-op. Methods are awaited by the dispatcher and should not
raise for expected business conditions. Anything they do raise reaches the transport.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from polarhooks.contracts.payloads import (
    CheckoutCreatedEvent,
    CustomerCreatedEvent,
    OrderCreatedEvent,
    SubscriptionCreatedEvent,
)


logger = logging.getLogger(__name__)


class WebhookEventHandler:
    async def on_checkout_created(self, data: CheckoutCreatedEvent) -> None:
        return None

    async def on_customer_created(self, data: CustomerCreatedEvent) -> None:
        return None

    async def on_order_created(self, data: OrderCreatedEvent) -> None:
        return None

    async def on_subscription_created(self, data: SubscriptionCreatedEvent) -> None:
        return None

    async def on_unknown_event(self, type: str, data: Dict[str, Any]) -> None:
        """Catch-all for types without a dedicated method, or whose data did not decode."""
        return None


class LoggingWebhookHandler(WebhookEventHandler):
    """Sample handler: logs one line per event. Replace with application logic."""

    async def on_checkout_created(self, data: CheckoutCreatedEvent) -> None:
        logger.info(f"[handler] checkout.created: {data.id} status={data.status}")

    async def on_customer_created(self, data: CustomerCreatedEvent) -> None:
        logger.info(f"[handler] customer.created: {data.id} email={data.email}")

    async def on_order_created(self, data: OrderCreatedEvent) -> None:
        logger.info(f"[handler] order.created: {data.id} amount={data.amount} {data.currency}")

    async def on_subscription_created(self, data: SubscriptionCreatedEvent) -> None:
        logger.info(f"[handler] subscription.created: {data.id} customer={data.customer_id}")

    async def on_unknown_event(self, type: str, data: Dict[str, Any]) -> None:
        logger.info(f"[handler] unknown event: {type}")
