"""Envelope parsing.

Wire shape (field names are normative):

    {"type": "order.created", "data": {...}, "event_id": "evt_abc123",
     "created_at": "2025-01-01T00:00:00Z"}

Only `type` is required. Callers must verify the signature before parsing.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict

from polarhooks.contracts.timestamps import is_zero_timestamp, now_utc, parse_iso8601
from polarhooks.core.models import WebhookEnvelope


class InvalidPayload(ValueError):
    """The body is not a usable webhook envelope."""


def _decode_json(raw_body: bytes | str) -> Any:
    if isinstance(raw_body, (bytes, bytearray)):
        try:
            raw_body = bytes(raw_body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPayload("body is not valid UTF-8") from e
    try:
        return json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise InvalidPayload(f"body is not valid JSON: {e.msg}") from e


def _created_at(obj: Dict[str, Any]) -> datetime:
    v = obj.get("created_at")
    if v is None:
        return now_utc()
    if not isinstance(v, str):
        raise InvalidPayload("created_at must be an ISO8601 string")
    if not v.strip() or is_zero_timestamp(v.strip()):
        return now_utc()
    try:
        return parse_iso8601(v)
    except ValueError as e:
        raise InvalidPayload(str(e)) from e


def parse_envelope(raw_body: bytes | str) -> WebhookEnvelope:
    obj = _decode_json(raw_body)
    if not isinstance(obj, dict):
        raise InvalidPayload("envelope must be a JSON object")

    event_type = obj.get("type")
    if not isinstance(event_type, str) or not event_type.strip():
        raise InvalidPayload("type must be non-empty string")

    data = obj.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidPayload("data must be object")

    event_id = obj.get("event_id")
    if event_id is None:
        event_id = ""
    if not isinstance(event_id, str):
        raise InvalidPayload("event_id must be string")

    return WebhookEnvelope(
        type=event_type,
        data=data,
        event_id=event_id,
        created_at=_created_at(obj),
    )


def envelope_to_dict(env: WebhookEnvelope) -> Dict[str, Any]:
    return {
        "type": env.type,
        "data": env.data,
        "event_id": env.event_id,
        "created_at": env.created_at.isoformat(),
    }
