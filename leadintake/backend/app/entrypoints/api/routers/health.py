# app/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..deps import require_api_key
from ....config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config(request: Request) -> dict[str, Any]:
    return {
        "ENV": settings.ENV,
        "LEADS_DB_URL": settings.LEADS_DB_URL,
        "APIFY_BASE_URL": settings.APIFY_BASE_URL,
        "APIFY_TOKEN_SET": bool(settings.APIFY_TOKEN),
        "DEFAULT_PHONE_REGION": settings.DEFAULT_PHONE_REGION,
        "DEDUP_BY_WEBSITE": settings.DEDUP_BY_WEBSITE,
        "ENGAGEMENT_CONFIGURED": bool(settings.ENGAGEMENT_WEBHOOK_URL),
        "BACKGROUND_TASKS_IN_FLIGHT": request.app.state.dispatcher.in_flight,
    }
