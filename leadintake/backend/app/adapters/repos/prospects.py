# app/adapters/repos/prospects.py
from __future__ import annotations

import json
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..sources.base import CanonicalLead
from ...models import Prospect


class ProspectRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def existing_phones(self, campaign_id: str) -> set[str]:
        q = (
            select(Prospect.phone)
            .where(Prospect.campaign_id == campaign_id)
            .where(Prospect.phone.isnot(None))
            .where(Prospect.phone != "")
        )
        return set((await self.session.execute(q)).scalars().all())

    async def existing_websites(self, campaign_id: str) -> set[str]:
        q = (
            select(Prospect.website)
            .where(Prospect.campaign_id == campaign_id)
            .where(Prospect.website.isnot(None))
            .where(Prospect.website != "")
        )
        return set((await self.session.execute(q)).scalars().all())

    async def bulk_insert(self, leads: Iterable[CanonicalLead]) -> int:
        """
        Insert canonical leads as prospects. Caller owns the transaction:
        one commit for the batch, or a rollback for all of it.
        """
        rows = [
            Prospect(
                campaign_id=lead.campaign_id,
                source=lead.source,
                source_id=lead.source_id,
                name=lead.name,
                company=lead.company,
                title=lead.title,
                phone=lead.phone,
                email=lead.email,
                website=lead.website,
                linkedin_url=lead.linkedin_url,
                location=lead.location,
                raw_json=json.dumps(lead.raw_data, ensure_ascii=False, default=str),
                status=lead.status,
            )
            for lead in leads
        ]
        if not rows:
            return 0
        self.session.add_all(rows)
        await self.session.flush()
        return len(rows)
