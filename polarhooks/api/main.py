from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
import uvicorn

from polarhooks.contracts.event_types import SIGNATURE_HEADERS, WEBHOOK_ID_HEADERS, WEBHOOK_TIMESTAMP_HEADERS, first_header
from polarhooks.contracts.timestamps import parse_iso8601
from polarhooks.core.event_store import DEFAULT_QUERY_ITEMS, EventStore, InMemoryEventStore
from polarhooks.core.settings import Settings, load_settings
from polarhooks.webhooks.handler import LoggingWebhookHandler, WebhookEventHandler
from polarhooks.webhooks.pipeline import ProcessResult, WebhookService


logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook/polar"
EVENTS_PATH = "/api/webhook/events"
TEST_PATH = "/api/webhook/test"


def create_app(
    settings: Optional[Settings] = None,
    handler: Optional[WebhookEventHandler] = None,
    store: Optional[EventStore] = None,
) -> FastAPI:
    s = settings or load_settings()
    service = WebhookService(
        secret=s.webhook_secret,
        handler=handler or LoggingWebhookHandler(),
        store=store if store is not None else InMemoryEventStore(max_items=s.event_store_max_items),
    )
    if not service.verification_enabled:
        logger.warning("Webhook secret not configured: signature verification is DISABLED")

    app = FastAPI(title="Polar Webhook Receiver")
    app.state.settings = s
    app.state.webhook_service = service

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get(TEST_PATH)
    def test() -> dict:
        return {
            "status": "running",
            "message": "Webhook server is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": [
                f"{TEST_PATH} - liveness banner",
                f"{WEBHOOK_PATH} - receive Polar webhooks",
                f"{EVENTS_PATH} - recently received events",
            ],
        }

    @app.post(WEBHOOK_PATH)
    async def receive_webhook(request: Request) -> JSONResponse:
        body = await request.body()
        signature = first_header(request.headers, SIGNATURE_HEADERS)
        webhook_id = first_header(request.headers, WEBHOOK_ID_HEADERS) or None
        webhook_ts = first_header(request.headers, WEBHOOK_TIMESTAMP_HEADERS) or None
        logger.info(f"Received webhook - id={webhook_id} timestamp={webhook_ts}")

        try:
            result = await service.process(body, signature)
        except Exception:
            logger.exception("Error processing webhook")
            return JSONResponse(status_code=500, content={"error": "Internal server error"})

        if result is ProcessResult.UNAUTHORIZED:
            return JSONResponse(status_code=401, content={"error": "Invalid signature"})
        if result is ProcessResult.BAD_PAYLOAD:
            return JSONResponse(status_code=400, content={"error": "Invalid payload"})
        return JSONResponse(status_code=200, content={"received": True})

    @app.get(EVENTS_PATH)
    def list_events(
        since: Optional[str] = None,
        type_: Optional[str] = Query(default=None, alias="type"),
        max_items: int = Query(default=DEFAULT_QUERY_ITEMS, alias="max"),
    ) -> JSONResponse:
        if since:
            try:
                since_utc = parse_iso8601(since)
            except ValueError as e:
                return JSONResponse(status_code=400, content={"error": str(e)})
        else:
            since_utc = datetime.now(timezone.utc) - timedelta(minutes=s.events_lookback_minutes)

        records = service.query(since_utc, type=type_ or None, max_items=max_items)
        return JSONResponse(content={"events": [r.to_dict() for r in records]})

    return app


def main() -> None:
    s = load_settings()
    logging.basicConfig(level=getattr(logging, s.log_level, logging.INFO))
    logger.info(f"Starting webhook receiver (env={s.env}) on {s.host}:{s.port}{WEBHOOK_PATH}")
    uvicorn.run(create_app(s), host=s.host, port=s.port)


if __name__ == "__main__":
    main()
