# app/adapters/sources/base.py
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Mapping

from ...domain.parsing import get_first
from ...domain.lead_status import LeadStatus


class SourceType(str, enum.Enum):
    linkedin = "linkedin"
    maps = "maps"
    social = "social"
    web = "web"


# Canonical text fields, in resolution order (derivations may read earlier ones).
FIELDS: tuple[str, ...] = (
    "source_id",
    "email",
    "website",
    "linkedin_url",
    "phone",
    "name",
    "company",
    "title",
    "location",
)

Derivation = Callable[[dict[str, Any], dict[str, str]], str]


@dataclass(frozen=True)
class CanonicalLead:
    source: str
    source_id: str
    name: str
    company: str
    title: str
    phone: str
    email: str
    website: str
    linkedin_url: str
    location: str
    raw_data: dict[str, Any]
    campaign_id: str
    status: LeadStatus

    def as_dict(self, *, include_raw: bool = True) -> dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        if not include_raw:
            d.pop("raw_data", None)
        return d


@dataclass(frozen=True)
class SourceAdapter:
    """
    Per-origin field mapping + admission rule, as data.

    aliases:          canonical field -> raw keys tried in order (first non-empty wins)
    derived:          canonical field -> fallback computed when no alias resolved
    identity_fields:  a record is admitted with a name plus ANY of these;
                      empty tuple => the name alone is enough
    """

    source_type: SourceType
    aliases: Mapping[str, tuple[str, ...]]
    identity_fields: tuple[str, ...]
    derived: Mapping[str, Derivation] = field(default_factory=dict)

    def extract(self, raw: dict[str, Any]) -> dict[str, str]:
        out: dict[str, str] = {}
        for name in FIELDS:
            out[name] = get_first(raw, *self.aliases.get(name, ()))
        for name in FIELDS:
            fallback = self.derived.get(name)
            if not out[name] and fallback is not None:
                out[name] = (fallback(raw, out) or "").strip()
        return out

    def drop_reason(self, fields: Mapping[str, str]) -> str | None:
        """None when admitted, else a drop_reasons key."""
        if not fields.get("name"):
            return "missing_name"
        if self.identity_fields and not any(fields.get(k) for k in self.identity_fields):
            return "missing_identity"
        return None
