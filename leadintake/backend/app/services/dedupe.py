# app/services/dedupe.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..adapters.sources.base import CanonicalLead

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DedupResult:
    unique: list[CanonicalLead]
    duplicates: list[CanonicalLead]


def deduplicate(
    leads: Iterable[CanonicalLead],
    existing_phones: Iterable[str] = (),
    existing_websites: Iterable[str] = (),
) -> DedupResult:
    """
    Phone OR website already seen => duplicate.

    Streaming: every accepted lead feeds its phone/website into the working sets,
    so a later lead colliding with an earlier *new* one is caught too. First
    occurrence wins. The caller's sets are copied, never mutated.
    """
    seen_phones = set(existing_phones)
    seen_websites = set(existing_websites)

    unique: list[CanonicalLead] = []
    duplicates: list[CanonicalLead] = []

    for lead in leads:
        if (lead.phone and lead.phone in seen_phones) or (lead.website and lead.website in seen_websites):
            duplicates.append(lead)
            continue

        if lead.phone:
            seen_phones.add(lead.phone)
        if lead.website:
            seen_websites.add(lead.website)
        unique.append(lead)

    log.info("dedup total=%d unique=%d duplicates=%d", len(unique) + len(duplicates), len(unique), len(duplicates))
    return DedupResult(unique=unique, duplicates=duplicates)
