"""Route a parsed envelope to exactly one handler method.

`DISPATCH_TABLE` is a flat map from exact `type` string to (decoder, handler method name).
To support a new event type, add a payload + decoder in `contracts.payloads`, a no-op
method on `WebhookEventHandler`, and one entry here.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Tuple

from polarhooks.contracts import event_types
from polarhooks.contracts.payloads import (
    decode_checkout_created,
    decode_customer_created,
    decode_order_created,
    decode_subscription_created,
)
from polarhooks.core.models import WebhookEnvelope
from polarhooks.webhooks.handler import WebhookEventHandler


logger = logging.getLogger(__name__)

Decoder = Callable[[Any], Any]

DISPATCH_TABLE: Dict[str, Tuple[Decoder, str]] = {
    event_types.CHECKOUT_CREATED: (decode_checkout_created, "on_checkout_created"),
    event_types.CUSTOMER_CREATED: (decode_customer_created, "on_customer_created"),
    event_types.ORDER_CREATED: (decode_order_created, "on_order_created"),
    event_types.SUBSCRIPTION_CREATED: (decode_subscription_created, "on_subscription_created"),
}


async def dispatch(envelope: WebhookEnvelope, handler: WebhookEventHandler) -> None:
    """Invoke the typed handler method for `envelope.type`, else the catch-all.

    A recognized type whose data fails to decode goes to the catch-all with the raw data.
    Handler exceptions propagate.
    """

    entry = DISPATCH_TABLE.get(envelope.type)
    if entry is not None:
        decode, method_name = entry
        try:
            payload = decode(envelope.data)
        except (ValueError, TypeError) as e:
            logger.debug(
                "typed_decode_failed",
                extra={"event_type": envelope.type, "event_id": envelope.event_id, "error": str(e)},
            )
        else:
            await getattr(handler, method_name)(payload)
            return

    await handler.on_unknown_event(envelope.type, envelope.data)
