# app/adapters/sources/social.py
from __future__ import annotations

from typing import Any

from ...domain.parsing import get_first
from .base import SourceAdapter, SourceType


def _bio_snippet(raw: dict[str, Any], _: dict[str, str]) -> str:
    return get_first(raw, "bio", "biography")[:100]


def _creator(raw: dict[str, Any], _: dict[str, str]) -> str:
    return "Creator"


# Instagram / TikTok profile scrapers. No phone aliases: these leads always go to
# enrichment, so a name is all the admission rule asks for.
SOCIAL = SourceAdapter(
    source_type=SourceType.social,
    aliases={
        "source_id": ("id", "username", "profileUrl"),
        "name": ("fullName", "name", "username"),
        "company": ("businessName",),
        "title": ("category", "businessCategoryName"),
        "email": ("publicEmail", "businessEmail"),
        "website": ("externalUrl", "website"),
        "location": ("location",),
    },
    derived={"company": _bio_snippet, "title": _creator},
    identity_fields=(),
)
