# app/adapters/sources/web.py
from __future__ import annotations

from typing import Any

from ...domain.names import company_from_domain, name_from_email
from ...domain.parsing import get_first
from .base import SourceAdapter, SourceType


def _name_from_email(_: dict[str, Any], fields: dict[str, str]) -> str:
    return name_from_email(fields.get("email", ""))


def _company_from_domain(raw: dict[str, Any], _: dict[str, str]) -> str:
    return company_from_domain(get_first(raw, "domain"))


# Generic contact/email finders; also the fallback for unknown actors.
WEB = SourceAdapter(
    source_type=SourceType.web,
    aliases={
        "source_id": ("url", "domain", "id"),
        "name": ("name", "contactPerson"),
        "company": ("company", "organization"),
        "title": ("title",),
        "phone": ("phone", "phoneNumber", "phones"),
        "email": ("emails", "email"),
        "website": ("url", "domain"),
        "linkedin_url": ("linkedin", "linkedIns"),
        "location": ("location", "country"),
    },
    derived={"name": _name_from_email, "company": _company_from_domain},
    identity_fields=("phone", "email"),
)
