# app/models.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    DateTime,
    Enum,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .domain.lead_status import LeadStatus
from .domain.run_status import RunStatus


class Base(DeclarativeBase):
    pass


# -----------------------------
# Models
# -----------------------------
class ExtractionRun(Base):
    """
    One execution of an external scraping job.
    Rows are created by whoever launches the job; this service only moves `status`
    (plus finished_at/results/error) through app.domain.run_status.transition().
    """
    __tablename__ = "extraction_runs"
    __table_args__ = (UniqueConstraint("run_id", name="uq_extraction_run_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    run_id: Mapped[str] = mapped_column(String(80), index=True)

    campaign_id: Mapped[str] = mapped_column(String(80), index=True)
    actor_key: Mapped[str] = mapped_column(String(160))

    status: Mapped[RunStatus] = mapped_column(Enum(RunStatus), default=RunStatus.pending, index=True)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # {"total": .., "normalized": .., "unique": .., "duplicates": .., ...}
    results_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)


class Prospect(Base):
    __tablename__ = "prospects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[str] = mapped_column(String(80), index=True)

    # linkedin | maps | web | instagram | tiktok | ...
    source: Mapped[str] = mapped_column(String(40), index=True)
    source_id: Mapped[str] = mapped_column(String(500), default="")

    name: Mapped[str] = mapped_column(String(255))
    company: Mapped[str] = mapped_column(String(255), default="")
    title: Mapped[str] = mapped_column(String(255), default="")

    # E.164 or empty
    phone: Mapped[str] = mapped_column(String(20), default="", index=True)
    email: Mapped[str] = mapped_column(String(255), default="")
    website: Mapped[str] = mapped_column(String(500), default="", index=True)
    linkedin_url: Mapped[str] = mapped_column(String(500), default="")
    location: Mapped[str] = mapped_column(String(255), default="")

    # upstream record, verbatim, for audit
    raw_json: Mapped[str] = mapped_column(Text, default="{}")

    status: Mapped[LeadStatus] = mapped_column(Enum(LeadStatus), default=LeadStatus.enriching, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
