from __future__ import annotations

from typing import Protocol, Sequence

from ..adapters.sources.base import CanonicalLead


class EngagementTrigger(Protocol):
    """Downstream hook told about freshly imported leads. Return value is ignored."""

    async def on_new_leads_imported(self, campaign_id: str, leads: Sequence[CanonicalLead]) -> None:
        ...
