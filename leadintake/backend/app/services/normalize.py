# app/services/normalize.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..adapters.sources.base import CanonicalLead, SourceAdapter
from ..adapters.sources.detect import Detection, detect_source
from ..adapters.sources.registry import get_adapter
from ..domain.lead_status import lead_status
from ..domain.names import normalize_email, normalize_name
from ..domain.phone import normalize_phone

log = logging.getLogger(__name__)


@dataclass
class NormalizeResult:
    leads: list[CanonicalLead]
    total: int
    detection: Detection
    drop_reasons: dict[str, int] = field(default_factory=dict)

    @property
    def dropped(self) -> int:
        return self.total - len(self.leads)


def normalize_record(
    raw: dict[str, Any],
    *,
    adapter: SourceAdapter,
    source: str,
    campaign_id: str,
) -> tuple[CanonicalLead | None, str | None]:
    """
    One raw record -> (lead, None) or (None, drop_reason).
    """
    fields = adapter.extract(raw)
    fields["name"] = normalize_name(fields["name"])
    fields["email"] = normalize_email(fields["email"])
    fields["phone"] = normalize_phone(fields["phone"])

    reason = adapter.drop_reason(fields)
    if reason:
        return None, reason

    lead = CanonicalLead(
        source=source,
        source_id=fields["source_id"],
        name=fields["name"],
        company=fields["company"],
        title=fields["title"],
        phone=fields["phone"],
        email=fields["email"],
        website=fields["website"],
        linkedin_url=fields["linkedin_url"],
        location=fields["location"],
        raw_data=raw,
        campaign_id=campaign_id,
        status=lead_status(fields["phone"]),
    )
    return lead, None


def normalize_records(
    records: Iterable[Any],
    *,
    campaign_id: str,
    actor_key: str | None,
) -> NormalizeResult:
    """
    Raw dataset items of one run -> canonical leads.

    The adapter is picked once per run from the actor key. Records failing the
    adapter's admission rule are dropped and only counted in drop_reasons.
    """
    detection = detect_source(actor_key)
    adapter = get_adapter(detection.source_type)

    drop_reasons: dict[str, int] = defaultdict(int)
    leads: list[CanonicalLead] = []
    total = 0

    for raw in records:
        total += 1
        if not isinstance(raw, dict):
            drop_reasons["not_an_object"] += 1
            continue

        lead, reason = normalize_record(raw, adapter=adapter, source=detection.source, campaign_id=campaign_id)
        if lead is None:
            drop_reasons[reason or "unknown"] += 1
            continue
        leads.append(lead)

    log.info(
        "normalized actor_key=%s source_type=%s total=%d normalized=%d dropped=%d",
        actor_key,
        detection.source_type.value,
        total,
        len(leads),
        total - len(leads),
    )
    return NormalizeResult(leads=leads, total=total, detection=detection, drop_reasons=dict(drop_reasons))
