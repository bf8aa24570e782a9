# app/adapters/sources/maps.py
from __future__ import annotations

from typing import Any

from ...domain.parsing import get_first
from .base import SourceAdapter, SourceType


def _city_state(raw: dict[str, Any], _: dict[str, str]) -> str:
    parts = [get_first(raw, "city"), get_first(raw, "state")]
    return ", ".join(p for p in parts if p)


# Google Maps place scrapers (Compass, Maps + contact details)
MAPS = SourceAdapter(
    source_type=SourceType.maps,
    aliases={
        "source_id": ("placeId", "cid", "url"),
        # places have no person behind them: the business is the lead
        "name": ("title", "name", "businessName"),
        "company": ("title", "name", "businessName"),
        "title": ("category", "categoryName", "categories"),
        "phone": ("phone", "phoneNumber", "phoneUnformatted"),
        "email": ("emails", "email"),
        "website": ("website", "url"),
        "location": ("address",),
    },
    derived={"location": _city_state},
    identity_fields=("phone", "email", "website"),
)
