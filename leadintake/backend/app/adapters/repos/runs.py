# app/adapters/repos/runs.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.run_status import RunStatus, transition
from ...models import ExtractionRun


class ExtractionRunRepository:
    """
    Run metadata store. Rows are written by whoever launches the scrape; here we
    only read them and move status forward. Flushes, never commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_run_id(self, run_id: str) -> ExtractionRun | None:
        q = select(ExtractionRun).where(ExtractionRun.run_id == run_id)
        return (await self.session.execute(q)).scalars().first()

    async def list_for_campaign(self, campaign_id: str, *, limit: int = 50) -> list[ExtractionRun]:
        q = (
            select(ExtractionRun)
            .where(ExtractionRun.campaign_id == campaign_id)
            .order_by(desc(ExtractionRun.started_at), desc(ExtractionRun.id))
            .limit(limit)
        )
        return list((await self.session.execute(q)).scalars().all())

    async def mark_completed(self, run: ExtractionRun, results: dict[str, Any]) -> None:
        run.status = transition(run.status, RunStatus.completed)
        run.finished_at = datetime.utcnow()
        run.results_json = json.dumps(results)
        run.error_message = None
        await self.session.flush()

    async def mark_failed(self, run: ExtractionRun, reason: str) -> None:
        run.status = transition(run.status, RunStatus.failed)
        run.finished_at = datetime.utcnow()
        run.error_message = reason
        await self.session.flush()

    async def mark_error(self, run: ExtractionRun, err: Exception | str) -> None:
        run.status = transition(run.status, RunStatus.error)
        run.finished_at = datetime.utcnow()
        run.error_message = str(err)
        await self.session.flush()
