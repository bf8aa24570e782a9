# app/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..adapters.clients.apify import ApifyClient
from ..db import AsyncSessionLocal, engine
from ..integrations.webhook import build_engagement_trigger
from ..models import Base
from ..service_layer.dispatcher import BackgroundDispatcher
from ..service_layer.ingest_run import IngestionPipeline
from .api.routers import apify, health, runs


def create_app(
    *,
    pipeline: IngestionPipeline | None = None,
    dispatcher: BackgroundDispatcher | None = None,
    create_tables: bool = True,
) -> FastAPI:
    app = FastAPI(title="Leadintake - Lead Ingestion Pipeline")

    app.state.dispatcher = dispatcher or BackgroundDispatcher()
    app.state.pipeline = pipeline or IngestionPipeline(
        session_factory=AsyncSessionLocal,
        platform=ApifyClient(),
        trigger=build_engagement_trigger(),
    )

    @app.on_event("startup")
    async def _startup() -> None:
        # Single place where DB tables are created in dev.
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        # let in-flight runs finish writing their status
        await app.state.dispatcher.drain()

    # Routers
    app.include_router(health.router)
    app.include_router(apify.router)
    app.include_router(runs.router)

    return app
