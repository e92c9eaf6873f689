"""Webhook receiver for Procore hook deliveries.

Endpoints:
    POST /webhook   -> accept one delivery, normalise it through the trigger
    GET  /events    -> received events, most recent first
    DELETE /events  -> clear the event log
    GET  /health    -> liveness plus the registered hook id

Run it with ``python -m procore_sdk webhook-serve``, which also registers
the hook with Procore before serving and removes it on shutdown.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections import deque
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, Field

from procore_sdk.trigger import WebhookTrigger

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================

class EventRecord(BaseModel):
    id: str
    received_at: float
    data: dict[str, Any]


class EventLog:
    """Bounded in-memory log of received events."""

    def __init__(self, max_events: int = 1000) -> None:
        self._events: deque[EventRecord] = deque(maxlen=max_events)

    def add(self, data: dict[str, Any]) -> EventRecord:
        record = EventRecord(id=uuid.uuid4().hex[:16], received_at=time.time(), data=data)
        self._events.append(record)
        return record

    def query(self, *, hook_event: str | None = None, limit: int = 100) -> list[EventRecord]:
        results = list(self._events)
        if hook_event:
            results = [r for r in results if r.data.get("hookEvent") == hook_event]
        return list(reversed(results[-limit:]))

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class EventList(BaseModel):
    count: int
    events: list[EventRecord] = Field(default_factory=list)


# =============================================================================
# App
# =============================================================================

def create_webhook_app(trigger: WebhookTrigger, *, max_events: int = 1000) -> FastAPI:
    app = FastAPI(
        title="Procore Webhook Receiver",
        description=f"Receives Procore '{trigger.event}' deliveries",
        version="1.0.0",
    )
    app.state.trigger = trigger
    app.state.events = EventLog(max_events)

    @app.post("/webhook")
    async def receive(request: Request):
        raw = await request.body()
        try:
            body = json.loads(raw) if raw else {}
        except ValueError:
            raise HTTPException(status_code=400, detail="Body is not valid JSON")
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Body must be a JSON object")

        data = trigger.handle(request.headers, body)
        record = app.state.events.add(data)
        logger.info("Received %s delivery %s", data.get("hookEvent") or trigger.event, record.id)
        return {"status": "ok", "id": record.id}

    @app.get("/events", response_model=EventList)
    async def list_events(
        hook_event: str | None = Query(default=None),
        limit: int = Query(default=100, ge=1, le=1000),
    ):
        events = app.state.events.query(hook_event=hook_event, limit=limit)
        return EventList(count=len(events), events=events)

    @app.delete("/events")
    async def clear_events():
        app.state.events.clear()
        return {"status": "ok"}

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "event": trigger.event,
            "webhook_id": trigger.webhook_id,
            "received": len(app.state.events),
        }

    return app
