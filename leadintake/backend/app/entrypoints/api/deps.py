# app/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Header, HTTPException, Request

from ...config import settings
from ...service_layer.dispatcher import BackgroundDispatcher
from ...service_layer.ingest_run import IngestionPipeline


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def get_pipeline(request: Request) -> IngestionPipeline:
    return request.app.state.pipeline


def get_dispatcher(request: Request) -> BackgroundDispatcher:
    return request.app.state.dispatcher
