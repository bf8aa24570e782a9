import json

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from conftest import LINKEDIN_ITEM, FakePlatform, FakeTrigger

from app.adapters.repos.prospects import ProspectRepository
from app.domain.lead_status import LeadStatus
from app.domain.run_status import RunStatus
from app.models import ExtractionRun, Prospect
from app.service_layer.ingest_run import IngestionPipeline

SECOND_ITEM = {
    "fullName": "ana lima",
    "linkedinUrl": "https://linkedin.com/in/ana",
    "email": "ana@acme.com",
}


def _pipeline(async_session_maker, platform, trigger=None, dedup_by_website=True):
    return IngestionPipeline(
        session_factory=async_session_maker,
        platform=platform,
        trigger=trigger,
        dedup_by_website=dedup_by_website,
    )


async def _run(async_session_maker, run_id="run-1") -> ExtractionRun:
    async with async_session_maker() as session:
        return (await session.execute(select(ExtractionRun).where(ExtractionRun.run_id == run_id))).scalars().one()


async def _prospects(async_session_maker) -> list[Prospect]:
    async with async_session_maker() as session:
        return list((await session.execute(select(Prospect).order_by(Prospect.id))).scalars().all())


@pytest.mark.asyncio
async def test_success_inserts_completes_and_notifies(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM, SECOND_ITEM, LINKEDIN_ITEM, {"nope": 1}]})
    trigger = FakeTrigger()

    res = await _pipeline(async_session_maker, platform, trigger).handle_run_succeeded("run-1", "ds-1")

    assert res is not None
    assert res["total"] == 4
    assert res["normalized"] == 3
    assert res["unique"] == 2
    assert res["duplicates"] == 1
    assert res["inserted"] == 2

    run = await _run(async_session_maker)
    assert run.status == RunStatus.completed
    assert run.finished_at is not None
    assert json.loads(run.results_json)["unique"] == 2

    rows = await _prospects(async_session_maker)
    assert [r.name for r in rows] == ["John Doe", "Ana Lima"]
    assert rows[0].phone == "+5511999991234"
    assert rows[0].status == LeadStatus.ready
    assert rows[1].status == LeadStatus.enriching
    assert json.loads(rows[0].raw_json)["jobTitle"] == "CMO"

    assert len(trigger.calls) == 1
    campaign_id, leads = trigger.calls[0]
    assert campaign_id == "camp-1"
    assert [lead.name for lead in leads] == ["John Doe", "Ana Lima"]


@pytest.mark.asyncio
async def test_missing_run_metadata_is_a_quiet_no_op(async_session_maker):
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM]})
    trigger = FakeTrigger()

    res = await _pipeline(async_session_maker, platform, trigger).handle_run_succeeded("ghost", "ds-1")

    assert res is None
    assert platform.dataset_calls == []
    assert await _prospects(async_session_maker) == []
    assert trigger.calls == []


@pytest.mark.asyncio
async def test_replayed_webhook_for_finalized_run_is_skipped(async_session_maker, seed_run):
    await seed_run(status=RunStatus.completed)
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM]})

    res = await _pipeline(async_session_maker, platform).handle_run_succeeded("run-1", "ds-1")

    assert res is None
    assert platform.dataset_calls == []
    assert (await _run(async_session_maker)).status == RunStatus.completed


@pytest.mark.asyncio
async def test_existing_campaign_phones_are_duplicates(async_session_maker, seed_run):
    await seed_run(run_id="run-1")
    await seed_run(run_id="run-2")
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM], "ds-2": [LINKEDIN_ITEM, SECOND_ITEM]})
    pipeline = _pipeline(async_session_maker, platform)

    await pipeline.handle_run_succeeded("run-1", "ds-1")
    res = await pipeline.handle_run_succeeded("run-2", "ds-2")

    assert res["unique"] == 1
    assert res["duplicates"] == 1
    assert len(await _prospects(async_session_maker)) == 2


@pytest.mark.asyncio
async def test_dedup_is_scoped_to_the_campaign(async_session_maker, seed_run):
    await seed_run(run_id="run-1", campaign_id="camp-1")
    await seed_run(run_id="run-2", campaign_id="camp-2")
    platform = FakePlatform(datasets={"ds": [LINKEDIN_ITEM]})
    pipeline = _pipeline(async_session_maker, platform)

    await pipeline.handle_run_succeeded("run-1", "ds")
    res = await pipeline.handle_run_succeeded("run-2", "ds")

    assert res["unique"] == 1


@pytest.mark.asyncio
async def test_existing_websites_count_when_enabled(async_session_maker, seed_run):
    await seed_run(run_id="run-1", actor_key="google-maps-scraper")
    await seed_run(run_id="run-2", actor_key="google-maps-scraper")
    first = {"title": "Loja A", "website": "https://loja.com", "email": "a@loja.com"}
    second = {"title": "Loja A Filial", "website": "https://loja.com", "email": "b@loja.com"}
    platform = FakePlatform(datasets={"ds-1": [first], "ds-2": [second]})

    await _pipeline(async_session_maker, platform).handle_run_succeeded("run-1", "ds-1")
    res = await _pipeline(async_session_maker, platform).handle_run_succeeded("run-2", "ds-2")
    assert res["duplicates"] == 1


@pytest.mark.asyncio
async def test_insert_failure_still_completes_run(async_session_maker, seed_run, monkeypatch):
    await seed_run()

    async def boom(self, leads):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ProspectRepository, "bulk_insert", boom)
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM]})
    trigger = FakeTrigger()

    res = await _pipeline(async_session_maker, platform, trigger).handle_run_succeeded("run-1", "ds-1")

    assert res["inserted"] == 0
    assert res["unique"] == 1
    run = await _run(async_session_maker)
    assert run.status == RunStatus.completed
    assert await _prospects(async_session_maker) == []
    assert len(trigger.calls) == 1


@pytest.mark.asyncio
async def test_dataset_fetch_failure_marks_run_error(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(datasets={})
    trigger = FakeTrigger()

    res = await _pipeline(async_session_maker, platform, trigger).handle_run_succeeded("run-1", "missing-ds")

    assert res is None
    run = await _run(async_session_maker)
    assert run.status == RunStatus.error
    assert "HTTP 404" in run.error_message
    assert trigger.calls == []


@pytest.mark.asyncio
async def test_trigger_failure_leaves_run_completed(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM]})

    res = await _pipeline(async_session_maker, platform, FakeTrigger(fail=True)).handle_run_succeeded("run-1", "ds-1")

    assert res is not None
    assert (await _run(async_session_maker)).status == RunStatus.completed


@pytest.mark.asyncio
async def test_no_unique_leads_means_no_notification(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(datasets={"ds-1": [{"fullName": "No Contact"}]})
    trigger = FakeTrigger()

    res = await _pipeline(async_session_maker, platform, trigger).handle_run_succeeded("run-1", "ds-1")

    assert res["normalized"] == 0
    assert res["drop_reasons"] == {"missing_identity": 1}
    assert trigger.calls == []
    assert (await _run(async_session_maker)).status == RunStatus.completed


@pytest.mark.asyncio
async def test_run_failed_records_platform_reason(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(runs={"run-1": {"id": "run-1", "status": "FAILED", "exitCode": 1}})

    reason = await _pipeline(async_session_maker, platform).handle_run_failed("run-1")

    assert reason == "exit code 1"
    run = await _run(async_session_maker)
    assert run.status == RunStatus.failed
    assert run.error_message == "exit code 1"
    assert run.finished_at is not None


@pytest.mark.asyncio
async def test_run_failed_detail_fetch_failure_leaves_status(async_session_maker, seed_run):
    await seed_run()
    platform = FakePlatform(runs={})

    reason = await _pipeline(async_session_maker, platform).handle_run_failed("run-1")

    assert reason is None
    run = await _run(async_session_maker)
    assert run.status == RunStatus.pending
    assert run.error_message is None


@pytest.mark.asyncio
async def test_run_failed_on_finalized_run_is_ignored(async_session_maker, seed_run):
    await seed_run(status=RunStatus.completed)
    platform = FakePlatform(runs={"run-1": {"statusMessage": "Actor crashed"}})

    reason = await _pipeline(async_session_maker, platform).handle_run_failed("run-1")

    assert reason is None
    assert (await _run(async_session_maker)).status == RunStatus.completed


@pytest.mark.asyncio
async def test_existing_websites_ignored_when_disabled(async_session_maker, seed_run):
    await seed_run(run_id="run-1", actor_key="google-maps-scraper")
    await seed_run(run_id="run-2", actor_key="google-maps-scraper")
    first = {"title": "Loja A", "website": "https://loja.com", "email": "a@loja.com"}
    second = {"title": "Loja A Filial", "website": "https://loja.com", "email": "b@loja.com"}
    platform = FakePlatform(datasets={"ds-1": [first], "ds-2": [second]})

    await _pipeline(async_session_maker, platform, dedup_by_website=False).handle_run_succeeded("run-1", "ds-1")
    res = await _pipeline(async_session_maker, platform, dedup_by_website=False).handle_run_succeeded("run-2", "ds-2")

    assert res["unique"] == 1
    assert res["duplicates"] == 0
    assert len(await _prospects(async_session_maker)) == 2


class _UnreachableSession:
    async def __aenter__(self):
        raise RuntimeError("db unreachable")

    async def __aexit__(self, *exc):
        return False


@pytest.mark.asyncio
async def test_run_lookup_failure_is_logged_not_raised(caplog):
    platform = FakePlatform(datasets={"ds-1": [LINKEDIN_ITEM]})
    trigger = FakeTrigger()
    pipeline = IngestionPipeline(session_factory=_UnreachableSession, platform=platform, trigger=trigger)

    res = await pipeline.handle_run_succeeded("run-1", "ds-1")

    assert res is None
    assert platform.dataset_calls == []
    assert trigger.calls == []
    assert "run metadata lookup failed run_id=run-1" in caplog.text


def test_lead_status_is_shared_by_orm_and_adapters():
    assert Prospect.status.type.enum_class is LeadStatus
