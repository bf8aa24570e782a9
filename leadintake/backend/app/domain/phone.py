# app/domain/phone.py
from __future__ import annotations

import logging
import re
from typing import Any

import phonenumbers

from ..config import settings

log = logging.getLogger(__name__)

_NON_PHONE_CHARS = re.compile(r"[^\d+]")

BRAZIL_CALLING_CODE = "+55"


def _clean(raw: str) -> tuple[str, int]:
    """Keep digits and a single leading '+'. Returns (cleaned, digit_count)."""
    s = _NON_PHONE_CHARS.sub("", raw)
    digits = s.replace("+", "")
    if s.startswith("+"):
        return "+" + digits, len(digits)
    return digits, len(digits)


def _parse(number: str, region: str) -> phonenumbers.PhoneNumber | None:
    try:
        return phonenumbers.parse(number, region)
    except phonenumbers.NumberParseException:
        return None


def normalize_phone(raw: Any, region: str | None = None) -> str:
    """
    Arbitrary phone text -> E.164 ("+5511999991234") or "" when it is not a real number.

    Region-biased (Brazil unless configured otherwise). A number that fails to parse
    without an explicit '+' gets exactly one more try with the Brazilian calling code.
    Empty output is a normal outcome; callers mark such leads as enriching.
    """
    if raw is None or isinstance(raw, bool):
        return ""

    cleaned, n_digits = _clean(str(raw))
    if n_digits < int(settings.PHONE_MIN_DIGITS):
        return ""

    region = region or settings.DEFAULT_PHONE_REGION

    parsed = _parse(cleaned, region)
    if parsed is None and not cleaned.startswith("+"):
        parsed = _parse(BRAZIL_CALLING_CODE + cleaned, region)

    if parsed is None or not phonenumbers.is_valid_number(parsed):
        log.debug("phone rejected raw=%r cleaned=%s", raw, cleaned)
        return ""

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
