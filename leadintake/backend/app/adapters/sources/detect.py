# app/adapters/sources/detect.py
from __future__ import annotations

import logging
from typing import NamedTuple

from .base import SourceType

log = logging.getLogger(__name__)


class Detection(NamedTuple):
    source_type: SourceType
    # value stored as CanonicalLead.source
    source: str


# Ordered: first fragment contained in the actor key wins.
# Adding an upstream scraper is a row here (plus an adapter if it is a new shape).
ACTOR_SOURCES: tuple[tuple[str, SourceType, str], ...] = (
    ("harvest-api", SourceType.linkedin, "linkedin"),
    ("harvest", SourceType.linkedin, "linkedin"),
    ("linkedin-scraper", SourceType.linkedin, "linkedin"),
    ("linkedin-profile-scraper", SourceType.linkedin, "linkedin"),
    ("linkedin-people-search", SourceType.linkedin, "linkedin"),
    ("linkedin-companies", SourceType.linkedin, "linkedin"),
    ("linkedin-company-scraper", SourceType.linkedin, "linkedin"),
    ("linkedin-jobs", SourceType.linkedin, "linkedin"),
    ("google-maps-scraper", SourceType.maps, "maps"),
    ("google-maps-email", SourceType.maps, "maps"),
    ("google-maps-with-contact", SourceType.maps, "maps"),
    ("crawler-google-places", SourceType.maps, "maps"),
    ("instagram-scraper", SourceType.social, "instagram"),
    ("tiktok-scraper", SourceType.social, "tiktok"),
    ("contact-details", SourceType.web, "web"),
    ("fast-email-finder", SourceType.web, "web"),
)

DEFAULT_DETECTION = Detection(SourceType.web, "web")


def detect_source(actor_key: str | None) -> Detection:
    key = (actor_key or "").lower()
    for fragment, source_type, source in ACTOR_SOURCES:
        if fragment in key:
            return Detection(source_type, source)
    log.debug("no actor fragment matched actor_key=%r; using web", actor_key)
    return DEFAULT_DETECTION
