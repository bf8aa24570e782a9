# app/entrypoints/api/routers/apify.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from ..deps import get_dispatcher, get_pipeline, require_api_key
from ....adapters.sources.detect import ACTOR_SOURCES
from ....schemas import SourceMappingOut, WebhookAck
from ....service_layer.dispatcher import BackgroundDispatcher
from ....service_layer.ingest_run import IngestionPipeline, dispatch_webhook_event

log = logging.getLogger(__name__)

router = APIRouter(prefix="/apify", tags=["apify"])


@router.post("/webhook", response_model=WebhookAck)
async def apify_webhook(
    request: Request,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """
    Ack first, work later. The 200 is fully sent before the event is even routed;
    routing only spawns a detached task. A 500 is possible only while reading the body.
    """
    try:
        event = await request.json()
        if not isinstance(event, dict):
            raise ValueError("webhook body must be a JSON object")
    except Exception as e:
        log.error("webhook handling error: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    event_data = event.get("eventData") if isinstance(event.get("eventData"), dict) else {}
    log.info("apify webhook received type=%s run_id=%s", event.get("eventType"), event_data.get("actorRunId"))

    return JSONResponse(
        status_code=200,
        content=WebhookAck().model_dump(),
        background=BackgroundTask(dispatch_webhook_event, event, pipeline=pipeline, dispatcher=dispatcher),
    )


@router.get("/sources", response_model=list[SourceMappingOut], dependencies=[Depends(require_api_key)])
def list_sources() -> list[SourceMappingOut]:
    """Actor-key fragments this service recognizes, in match order."""
    return [
        SourceMappingOut(fragment=fragment, source_type=source_type.value, source=source)
        for fragment, source_type, source in ACTOR_SOURCES
    ]
