# app/domain/lead_status.py
from __future__ import annotations

import enum


class LeadStatus(str, enum.Enum):
    # ready == reachable by phone; enriching == waiting on a contact channel
    ready = "ready"
    enriching = "enriching"


def lead_status(phone: str) -> LeadStatus:
    # phone is the only outreach channel today
    return LeadStatus.ready if phone else LeadStatus.enriching
