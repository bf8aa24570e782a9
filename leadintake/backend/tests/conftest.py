# tests/conftest.py
import asyncio

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.adapters.clients.apify import ApifyError
from app.adapters.sources.base import CanonicalLead
from app.domain.lead_status import LeadStatus
from app.domain.run_status import RunStatus
from app.models import Base, ExtractionRun


LINKEDIN_ITEM = {
    "fullName": "John Doe",
    "jobTitle": "CMO",
    "companyName": "TechCorp",
    "linkedinUrl": "https://linkedin.com/in/johndoe",
    "phoneNumber": "11999991234",
    "email": "john@techcorp.com",
}


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
def seed_run(async_session_maker):
    async def _seed(
        run_id: str = "run-1",
        campaign_id: str = "camp-1",
        actor_key: str = "harvest-api",
        status: RunStatus = RunStatus.pending,
    ) -> ExtractionRun:
        async with async_session_maker() as session:
            run = ExtractionRun(run_id=run_id, campaign_id=campaign_id, actor_key=actor_key, status=status)
            session.add(run)
            await session.commit()
            return run

    return _seed


class FakePlatform:
    """Stands in for the Apify client. `gate` holds dataset fetches until set."""

    def __init__(self, datasets=None, runs=None, gate: asyncio.Event | None = None):
        self.datasets = datasets or {}
        self.runs = runs or {}
        self.gate = gate
        self.dataset_calls: list[str] = []
        self.completed_fetches = 0

    async def list_dataset_items(self, dataset_id):
        self.dataset_calls.append(dataset_id)
        if self.gate is not None:
            await self.gate.wait()
        if dataset_id not in self.datasets:
            raise ApifyError(f"dataset {dataset_id}: HTTP 404")
        self.completed_fetches += 1
        return list(self.datasets[dataset_id])

    async def get_run(self, run_id):
        if run_id not in self.runs:
            raise ApifyError(f"run {run_id}: HTTP 404")
        return self.runs[run_id]


class FakeTrigger:
    def __init__(self, fail: bool = False):
        self.calls: list[tuple[str, list]] = []
        self.fail = fail

    async def on_new_leads_imported(self, campaign_id, leads):
        self.calls.append((campaign_id, list(leads)))
        if self.fail:
            raise RuntimeError("engagement engine down")


@pytest.fixture
def make_lead():
    def _make(phone: str = "", website: str = "", name: str = "Lead", campaign_id: str = "camp-1") -> CanonicalLead:
        return CanonicalLead(
            source="web",
            source_id="",
            name=name,
            company="",
            title="",
            phone=phone,
            email="",
            website=website,
            linkedin_url="",
            location="",
            raw_data={},
            campaign_id=campaign_id,
            status=LeadStatus.ready if phone else LeadStatus.enriching,
        )

    return _make
