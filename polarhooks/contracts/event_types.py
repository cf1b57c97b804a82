from __future__ import annotations

# Event types with a typed payload and a dedicated handler method.

CHECKOUT_CREATED = "checkout.created"
CUSTOMER_CREATED = "customer.created"
ORDER_CREATED = "order.created"
SUBSCRIPTION_CREATED = "subscription.created"

SUPPORTED_EVENT_TYPES = frozenset(
    {
        CHECKOUT_CREATED,
        CUSTOMER_CREATED,
        ORDER_CREATED,
        SUBSCRIPTION_CREATED,
    }
)

# Inbound headers: Polar-prefixed name first, Standard Webhooks name as fallback.

SIGNATURE_HEADERS = ("Polar-Webhook-Signature", "webhook-signature")
WEBHOOK_ID_HEADERS = ("Polar-Webhook-Id", "webhook-id")
WEBHOOK_TIMESTAMP_HEADERS = ("Polar-Webhook-Timestamp", "webhook-timestamp")


def first_header(headers, names: tuple[str, ...]) -> str:
    """Return the first non-empty header value among `names`, or ""."""
    for name in names:
        value = headers.get(name)
        if value:
            return value
    return ""
