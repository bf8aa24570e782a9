# app/adapters/sources/registry.py
from __future__ import annotations

from .base import SourceAdapter, SourceType
from .linkedin import LINKEDIN
from .maps import MAPS
from .social import SOCIAL
from .web import WEB

ADAPTERS: dict[SourceType, SourceAdapter] = {
    SourceType.linkedin: LINKEDIN,
    SourceType.maps: MAPS,
    SourceType.social: SOCIAL,
    SourceType.web: WEB,
}


def get_adapter(source_type: SourceType) -> SourceAdapter:
    return ADAPTERS[SourceType(source_type)]
