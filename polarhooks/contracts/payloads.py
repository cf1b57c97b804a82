"""Typed payloads for the supported event types.

Decoding is lenient about *missing* and *extra* fields (the provider schema moves ahead
of this package) but strict about wrong JSON types. A `ValueError` from a decoder means
"no usable typed data"; the dispatcher then falls back to the catch-all handler.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from polarhooks.contracts.timestamps import is_zero_timestamp, parse_iso8601


def _require_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError("data must be object")
    return data


def _opt_str(d: Dict[str, Any], k: str) -> str:
    v = d.get(k)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise ValueError(f"{k} must be string")
    return v


def _opt_int(d: Dict[str, Any], k: str) -> int:
    v = d.get(k)
    if v is None:
        return 0
    # bool is an int subclass; reject it explicitly.
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{k} must be int")
    return v


def _opt_ts(d: Dict[str, Any], k: str) -> Optional[datetime]:
    v = d.get(k)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError(f"{k} must be ISO8601 string")
    if not v.strip() or is_zero_timestamp(v.strip()):
        return None
    return parse_iso8601(v)


@dataclass(frozen=True)
class CheckoutCreatedEvent:
    id: str
    status: str
    customer_id: str
    product_id: str
    success_url: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CustomerCreatedEvent:
    id: str
    email: str
    name: str
    organization_id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class OrderCreatedEvent:
    """Emitted after a successful purchase. `amount` is in minor currency units."""

    id: str
    customer_id: str
    product_id: str
    amount: int
    currency: str
    status: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubscriptionCreatedEvent:
    id: str
    status: str
    customer_id: str
    product_id: str
    price_id: str
    created_at: Optional[datetime] = None


def decode_checkout_created(data: Any) -> CheckoutCreatedEvent:
    d = _require_object(data)
    return CheckoutCreatedEvent(
        id=_opt_str(d, "id"),
        status=_opt_str(d, "status"),
        customer_id=_opt_str(d, "customer_id"),
        product_id=_opt_str(d, "product_id"),
        success_url=_opt_str(d, "success_url"),
        created_at=_opt_ts(d, "created_at"),
    )


def decode_customer_created(data: Any) -> CustomerCreatedEvent:
    d = _require_object(data)
    return CustomerCreatedEvent(
        id=_opt_str(d, "id"),
        email=_opt_str(d, "email"),
        name=_opt_str(d, "name"),
        organization_id=_opt_str(d, "organization_id"),
        created_at=_opt_ts(d, "created_at"),
    )


def decode_order_created(data: Any) -> OrderCreatedEvent:
    d = _require_object(data)
    return OrderCreatedEvent(
        id=_opt_str(d, "id"),
        customer_id=_opt_str(d, "customer_id"),
        product_id=_opt_str(d, "product_id"),
        amount=_opt_int(d, "amount"),
        currency=_opt_str(d, "currency"),
        status=_opt_str(d, "status"),
        created_at=_opt_ts(d, "created_at"),
    )


def decode_subscription_created(data: Any) -> SubscriptionCreatedEvent:
    d = _require_object(data)
    return SubscriptionCreatedEvent(
        id=_opt_str(d, "id"),
        status=_opt_str(d, "status"),
        customer_id=_opt_str(d, "customer_id"),
        product_id=_opt_str(d, "product_id"),
        price_id=_opt_str(d, "price_id"),
        created_at=_opt_ts(d, "created_at"),
    )
