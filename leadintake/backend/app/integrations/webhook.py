from __future__ import annotations

import hmac
import hashlib
import json
import logging
from typing import Sequence

import httpx

from ..adapters.sources.base import CanonicalLead
from ..config import settings
from ..domain.lead_status import LeadStatus
from .base import EngagementTrigger

log = logging.getLogger(__name__)

EVENT_LEADS_IMPORTED = "leads.imported"


class WebhookEngagementTrigger(EngagementTrigger):
    """
    Hands imported leads to the engagement engine over HTTP.
    Only ready leads (with a phone) are forwarded; the engine cannot reach the rest yet.
    """

    def __init__(
        self,
        url: str,
        secret: str | None = None,
        timeout_s: float = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.secret = secret
        self.timeout_s = timeout_s
        self._transport = transport

    def _sign(self, body: bytes) -> str | None:
        if not self.secret:
            return None
        digest = hmac.new(self.secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
        return digest

    async def on_new_leads_imported(self, campaign_id: str, leads: Sequence[CanonicalLead]) -> None:
        ready = [lead for lead in leads if lead.status == LeadStatus.ready and lead.phone]
        if not ready:
            log.info("engagement skipped campaign_id=%s reason=no_ready_leads", campaign_id)
            return

        payload = {
            "campaign_id": campaign_id,
            "leads": [lead.as_dict(include_raw=False) for lead in ready],
        }
        body = json.dumps({"type": EVENT_LEADS_IMPORTED, "data": payload}).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        sig = self._sign(body)
        if sig:
            headers["X-Leadintake-Signature"] = sig

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                r = await client.post(self.url, content=body, headers=headers)
        except httpx.HTTPError as e:
            log.error("engagement delivery failed campaign_id=%s error=%r", campaign_id, e)
            return

        if 200 <= r.status_code < 300:
            log.info("engagement notified campaign_id=%s ready=%d", campaign_id, len(ready))
        else:
            log.error(
                "engagement delivery failed campaign_id=%s status=%d body=%s",
                campaign_id,
                r.status_code,
                r.text[:500],
            )


def build_engagement_trigger() -> EngagementTrigger | None:
    """None when no engagement endpoint is configured."""
    if not settings.ENGAGEMENT_WEBHOOK_URL:
        return None
    return WebhookEngagementTrigger(
        url=settings.ENGAGEMENT_WEBHOOK_URL,
        secret=settings.ENGAGEMENT_WEBHOOK_SECRET,
        timeout_s=settings.ENGAGEMENT_HTTP_TIMEOUT_S,
    )
