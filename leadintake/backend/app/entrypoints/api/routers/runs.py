# app/entrypoints/api/routers/runs.py
from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import require_api_key
from ....adapters.repos.runs import ExtractionRunRepository
from ....db import get_session
from ....models import ExtractionRun
from ....schemas import ExtractionRunOut

router = APIRouter(tags=["runs"])


def _run_out(run: ExtractionRun) -> ExtractionRunOut:
    return ExtractionRunOut(
        run_id=run.run_id,
        campaign_id=run.campaign_id,
        actor_key=run.actor_key,
        status=run.status.value,
        started_at=run.started_at,
        finished_at=run.finished_at,
        results=json.loads(run.results_json) if run.results_json else None,
        error_message=run.error_message,
    )


@router.get("/apify/runs/{run_id}", response_model=ExtractionRunOut, dependencies=[Depends(require_api_key)])
async def get_run(
    run_id: str,
    session: AsyncSession = Depends(get_session),
) -> ExtractionRunOut:
    run = await ExtractionRunRepository(session).get_by_run_id(run_id)
    if run is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return _run_out(run)


@router.get(
    "/campaigns/{campaign_id}/runs",
    response_model=list[ExtractionRunOut],
    dependencies=[Depends(require_api_key)],
)
async def campaign_runs(
    campaign_id: str,
    limit: int = Query(50, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
) -> list[ExtractionRunOut]:
    rows = await ExtractionRunRepository(session).list_for_campaign(campaign_id, limit=limit)
    return [_run_out(r) for r in rows]
