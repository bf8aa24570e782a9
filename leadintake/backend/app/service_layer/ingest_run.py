# app/service_layer/ingest_run.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.clients.apify import run_exit_reason
from ..adapters.repos.prospects import ProspectRepository
from ..adapters.repos.runs import ExtractionRunRepository
from ..adapters.sources.base import CanonicalLead
from ..config import settings
from ..domain.run_status import IllegalRunTransition, is_terminal
from ..integrations.base import EngagementTrigger
from ..models import ExtractionRun
from ..services.dedupe import deduplicate
from ..services.normalize import normalize_records
from .dispatcher import BackgroundDispatcher

log = logging.getLogger(__name__)

EVENT_RUN_SUCCEEDED = "ACTOR.RUN.SUCCEEDED"
EVENT_RUN_FAILED = "ACTOR.RUN.FAILED"

RunAction = Callable[[ExtractionRunRepository, ExtractionRun], Awaitable[None]]


class ExtractionPlatform(Protocol):
    async def list_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]: ...

    async def get_run(self, run_id: str) -> dict[str, Any]: ...


class IngestionPipeline:
    """
    Post-ack processing of one extraction run.

    Every failure is absorbed here and turned into run state (or a log line);
    nothing escapes to the caller, who already got its 200.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], AsyncSession],
        platform: ExtractionPlatform,
        trigger: EngagementTrigger | None = None,
        dedup_by_website: bool | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._platform = platform
        self._trigger = trigger
        self._dedup_by_website = settings.DEDUP_BY_WEBSITE if dedup_by_website is None else dedup_by_website

    # -------------------------
    # Run success
    # -------------------------
    async def handle_run_succeeded(self, run_id: str, dataset_id: str | None) -> dict[str, Any] | None:
        """
        Fetch -> normalize -> dedup -> insert -> mark completed -> notify.
        Returns the run results, or None when the run was skipped or ended in error.
        """
        try:
            async with self._session_factory() as session:
                run = await ExtractionRunRepository(session).get_by_run_id(run_id)
                if run is None:
                    log.warning("run metadata not found run_id=%s", run_id)
                    return None
                if is_terminal(run.status):
                    log.warning("run already finalized run_id=%s status=%s", run_id, run.status.value)
                    return None
                campaign_id, actor_key = run.campaign_id, run.actor_key
        except Exception:
            # no run state to write when the lookup itself fails
            log.exception("run metadata lookup failed run_id=%s", run_id)
            return None

        log.info("processing run run_id=%s campaign_id=%s actor_key=%s", run_id, campaign_id, actor_key)

        try:
            records = await self._platform.list_dataset_items(dataset_id or "")
            norm = normalize_records(records, campaign_id=campaign_id, actor_key=actor_key)

            phones, websites = await self._existing_identifiers(campaign_id)
            dedup = deduplicate(norm.leads, phones, websites)

            inserted = await self._insert(run_id, dedup.unique)

            results = {
                "total": norm.total,
                "normalized": len(norm.leads),
                "unique": len(dedup.unique),
                "duplicates": len(dedup.duplicates),
                "dropped": norm.dropped,
                "drop_reasons": norm.drop_reasons,
                "inserted": inserted,
                "source": norm.detection.source,
            }

            async def _complete(repo: ExtractionRunRepository, r: ExtractionRun) -> None:
                await repo.mark_completed(r, results)

            await self._update_run(run_id, _complete)
        except Exception as e:
            log.exception("run processing failed run_id=%s", run_id)
            await self._mark_error(run_id, e)
            return None

        if dedup.unique and self._trigger is not None:
            await self._notify(self._trigger, campaign_id, dedup.unique)

        return results

    async def _existing_identifiers(self, campaign_id: str) -> tuple[set[str], set[str]]:
        async with self._session_factory() as session:
            repo = ProspectRepository(session)
            phones = await repo.existing_phones(campaign_id)
            websites = await repo.existing_websites(campaign_id) if self._dedup_by_website else set()
        return phones, websites

    async def _insert(self, run_id: str, leads: Sequence[CanonicalLead]) -> int:
        """Best effort: a failed insert is logged and reported as 0, the run still completes."""
        if not leads:
            return 0
        async with self._session_factory() as session:
            try:
                n = await ProspectRepository(session).bulk_insert(leads)
                await session.commit()
            except Exception:
                await session.rollback()
                log.exception("prospect insert failed run_id=%s count=%d", run_id, len(leads))
                return 0
        log.info("prospects saved run_id=%s inserted=%d", run_id, n)
        return n

    async def _notify(self, trigger: EngagementTrigger, campaign_id: str, leads: Sequence[CanonicalLead]) -> None:
        try:
            await trigger.on_new_leads_imported(campaign_id, leads)
        except Exception:
            # run is already completed (terminal); the trigger's failure is its own
            log.exception("engagement trigger failed campaign_id=%s", campaign_id)

    # -------------------------
    # Run failure
    # -------------------------
    async def handle_run_failed(self, run_id: str) -> str | None:
        """
        Mark the run failed with the platform's reason. If the reason can't be fetched,
        log and leave the run as it is. Returns the recorded reason.
        """
        try:
            detail = await self._platform.get_run(run_id)
        except Exception as e:
            log.error("failed to fetch run detail run_id=%s error=%s", run_id, e)
            return None

        reason = run_exit_reason(detail)

        async def _fail(repo: ExtractionRunRepository, r: ExtractionRun) -> None:
            await repo.mark_failed(r, reason)

        try:
            updated = await self._update_run(run_id, _fail)
        except IllegalRunTransition as e:
            log.warning("run failure ignored run_id=%s: %s", run_id, e)
            return None
        except Exception:
            log.exception("failed to update run status run_id=%s", run_id)
            return None

        if not updated:
            return None
        log.warning("run failed run_id=%s reason=%s", run_id, reason)
        return reason

    # -------------------------
    # Run state writes
    # -------------------------
    async def _update_run(self, run_id: str, action: RunAction) -> bool:
        async with self._session_factory() as session:
            repo = ExtractionRunRepository(session)
            run = await repo.get_by_run_id(run_id)
            if run is None:
                log.warning("run metadata not found run_id=%s", run_id)
                return False
            await action(repo, run)
            await session.commit()
        return True

    async def _mark_error(self, run_id: str, err: Exception) -> None:
        async def _error(repo: ExtractionRunRepository, r: ExtractionRun) -> None:
            await repo.mark_error(r, err)

        try:
            await self._update_run(run_id, _error)
        except IllegalRunTransition as e:
            log.warning("run error not recorded run_id=%s: %s", run_id, e)
        except Exception:
            log.exception("failed to record run error run_id=%s", run_id)


# -------------------------
# Webhook event routing
# -------------------------
def _event_ids(event_data: dict[str, Any], resource: dict[str, Any]) -> tuple[str, str]:
    run_id = event_data.get("actorRunId") or event_data.get("runId") or resource.get("id") or ""
    dataset_id = event_data.get("defaultDatasetId") or resource.get("defaultDatasetId") or ""
    return str(run_id), str(dataset_id)


async def dispatch_webhook_event(
    event: dict[str, Any],
    *,
    pipeline: IngestionPipeline,
    dispatcher: BackgroundDispatcher,
) -> None:
    """
    Runs after the ack went out. Routes the event to a detached pipeline task and
    returns immediately; unknown event types are ignored.
    """
    event_type = event.get("eventType")
    event_data = event.get("eventData") if isinstance(event.get("eventData"), dict) else {}
    # platform default payload carries the run object here
    resource = event.get("resource") if isinstance(event.get("resource"), dict) else {}
    run_id, dataset_id = _event_ids(event_data, resource)

    if event_type not in (EVENT_RUN_SUCCEEDED, EVENT_RUN_FAILED):
        log.debug("unhandled webhook event type=%s", event_type)
        return
    if not run_id:
        log.warning("webhook event without run id type=%s", event_type)
        return

    if event_type == EVENT_RUN_SUCCEEDED:
        dispatcher.spawn(pipeline.handle_run_succeeded(run_id, dataset_id), name=f"run-succeeded:{run_id}")
    else:
        dispatcher.spawn(pipeline.handle_run_failed(run_id), name=f"run-failed:{run_id}")
