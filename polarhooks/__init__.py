"""Polar webhook ingestion.

Verify inbound webhook bodies, parse the event envelope, dispatch typed payloads to a
handler and keep a bounded window of recent events for delivery polling.
"""
from __future__ import annotations

from polarhooks.contracts.envelope import InvalidPayload, parse_envelope
from polarhooks.core.event_store import EventStore, InMemoryEventStore
from polarhooks.core.models import StoredEventRecord, WebhookEnvelope
from polarhooks.core.signature import compute_signature, verify_signature
from polarhooks.webhooks.dispatcher import dispatch
from polarhooks.webhooks.handler import LoggingWebhookHandler, WebhookEventHandler
from polarhooks.webhooks.pipeline import ProcessResult, WebhookService, process_inbound_event, query_events

__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "InvalidPayload",
    "LoggingWebhookHandler",
    "ProcessResult",
    "StoredEventRecord",
    "WebhookEnvelope",
    "WebhookEventHandler",
    "WebhookService",
    "compute_signature",
    "dispatch",
    "parse_envelope",
    "process_inbound_event",
    "query_events",
    "verify_signature",
]
