# app/adapters/sources/linkedin.py
from __future__ import annotations

from typing import Any

from ...domain.parsing import get_first
from .base import SourceAdapter, SourceType


def _first_plus_last(raw: dict[str, Any], _: dict[str, str]) -> str:
    parts = [get_first(raw, "firstName"), get_first(raw, "lastName")]
    return " ".join(p for p in parts if p)


# Profile/search exporters (HarvestAPI, Dev Fusion, Bebity, ...)
LINKEDIN = SourceAdapter(
    source_type=SourceType.linkedin,
    aliases={
        "source_id": ("linkedinUrl", "profileUrl", "url", "id"),
        "name": ("fullName", "name"),
        "company": ("companyName", "company", "currentCompany", "currentCompany.name"),
        "title": ("jobTitle", "title", "headline"),
        "phone": ("phoneNumber", "phone", "mobileNumber"),
        "email": ("email", "emails"),
        "website": ("companyWebsite", "website"),
        "linkedin_url": ("linkedinUrl", "profileUrl"),
        "location": ("location", "location.linkedinText", "city"),
    },
    derived={"name": _first_plus_last},
    identity_fields=("phone", "email", "linkedin_url"),
)
