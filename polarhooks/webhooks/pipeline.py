"""Inbound webhook pipeline: verify -> parse -> dispatch -> record.

The store record is written in a `finally` around dispatch, so an event that passed
verification and parsing shows up for delivery polling even if the handler raised.
Handler exceptions still propagate to the transport.
"""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

from polarhooks.contracts.envelope import InvalidPayload, parse_envelope
from polarhooks.core.event_store import DEFAULT_QUERY_ITEMS, EventStore
from polarhooks.core.models import StoredEventRecord, WebhookEnvelope
from polarhooks.core.signature import verify_signature
from polarhooks.webhooks.dispatcher import DISPATCH_TABLE, dispatch
from polarhooks.webhooks.handler import WebhookEventHandler


logger = logging.getLogger(__name__)


class ProcessResult(str, Enum):
    ACCEPTED = "accepted"
    UNAUTHORIZED = "unauthorized"
    BAD_PAYLOAD = "bad_payload"


async def process_inbound_event(
    raw_body: bytes,
    signature: str,
    secret: str,
    handler: WebhookEventHandler,
    store: EventStore,
) -> ProcessResult:
    if not verify_signature(raw_body, signature, secret):
        logger.warning("webhook_signature_rejected", extra={"body_bytes": len(raw_body)})
        return ProcessResult.UNAUTHORIZED

    try:
        envelope = parse_envelope(raw_body)
    except InvalidPayload as e:
        logger.warning("webhook_payload_invalid", extra={"error": str(e)})
        return ProcessResult.BAD_PAYLOAD

    if envelope.type not in DISPATCH_TABLE:
        logger.info(f"Unhandled event type: {envelope.type} (event_id={envelope.event_id})")

    record = StoredEventRecord.from_envelope(envelope)
    try:
        await dispatch(envelope, handler)
    finally:
        store.add(record)

    return ProcessResult.ACCEPTED


def query_events(
    store: EventStore,
    since_utc: datetime,
    type: Optional[str] = None,
    max_items: int = DEFAULT_QUERY_ITEMS,
) -> List[StoredEventRecord]:
    return store.list(since_utc, type=type, max_items=max_items)


class WebhookService:
    """Holds the signing secret, the handler and the store for one endpoint."""

    def __init__(self, secret: str, handler: WebhookEventHandler, store: EventStore) -> None:
        self.secret = secret or ""
        self.handler = handler
        self.store = store

    @property
    def verification_enabled(self) -> bool:
        return bool(self.secret.strip())

    def verify(self, raw_body: bytes, signature: str) -> bool:
        return verify_signature(raw_body, signature, self.secret)

    def parse(self, raw_body: bytes | str) -> WebhookEnvelope:
        return parse_envelope(raw_body)

    async def dispatch(self, envelope: WebhookEnvelope) -> None:
        await dispatch(envelope, self.handler)

    async def process(self, raw_body: bytes, signature: str) -> ProcessResult:
        return await process_inbound_event(raw_body, signature, self.secret, self.handler, self.store)

    def query(
        self,
        since_utc: datetime,
        type: Optional[str] = None,
        max_items: int = DEFAULT_QUERY_ITEMS,
    ) -> List[StoredEventRecord]:
        return query_events(self.store, since_utc, type=type, max_items=max_items)
