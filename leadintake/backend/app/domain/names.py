# app/domain/names.py
from __future__ import annotations

import re
from typing import Any

_WS = re.compile(r"\s+")


def _cap(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def normalize_name(raw: Any) -> str:
    """'  MARIO   silva ' -> 'Mario Silva'. Same rule for every source."""
    if raw is None:
        return ""
    s = _WS.sub(" ", str(raw).strip())
    if not s:
        return ""
    return " ".join(_cap(w) for w in s.split(" "))


def normalize_email(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip().lower()


def name_from_email(email: str) -> str:
    """'joao.silva@acme.com' -> 'Joao Silva' (best effort for contact scrapers)."""
    if not email or "@" not in email:
        return ""
    local = email.split("@", 1)[0]
    return " ".join(w[:1].upper() + w[1:] for w in re.split(r"[._]+", local) if w)


def company_from_domain(domain: str) -> str:
    """'https://www.acme-tools.com.br/contato' -> 'Acme Tools'."""
    if not domain:
        return ""
    host = re.sub(r"^[a-z]+://", "", domain.strip().lower())
    host = host.split("/", 1)[0]
    host = re.sub(r"^www\.", "", host)
    label = host.split(".", 1)[0]
    return " ".join(w[:1].upper() + w[1:] for w in label.split("-") if w)
