# scripts/process_run.py
# Re-run the success pipeline for one pending run without waiting for a webhook.
#   RUN_ID=abc DATASET_ID=xyz python scripts/process_run.py
import asyncio
import logging
import os

from app.adapters.clients.apify import ApifyClient
from app.db import AsyncSessionLocal
from app.integrations.webhook import build_engagement_trigger
from app.service_layer.ingest_run import IngestionPipeline


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    pipeline = IngestionPipeline(
        session_factory=AsyncSessionLocal,
        platform=ApifyClient(),
        trigger=build_engagement_trigger(),
    )
    res = await pipeline.handle_run_succeeded(os.environ["RUN_ID"], os.environ.get("DATASET_ID", ""))
    print(res)


if __name__ == "__main__":
    asyncio.run(main())
