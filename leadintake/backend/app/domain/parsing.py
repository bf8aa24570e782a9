# app/domain/parsing.py
from __future__ import annotations

from typing import Any


def coerce_str(x: Any) -> str:
    """
    Scalar -> stripped text. Lists contribute their first non-empty element.
    Dicts and None are "empty".
    """
    if x is None or isinstance(x, (dict, bool)):
        return ""
    if isinstance(x, (list, tuple)):
        for item in x:
            s = coerce_str(item)
            if s:
                return s
        return ""
    return str(x).strip()


def get_nested(payload: dict[str, Any], path: str) -> Any:
    """Tiny dot-path getter: 'location.linkedinText' or 'address.city'."""
    cur: Any = payload
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur


def get_first(payload: dict[str, Any], *keys: str) -> str:
    """Return the first non-empty value (as text) among keys; dotted keys walk nested dicts."""
    for k in keys:
        v = get_nested(payload, k) if "." in k else payload.get(k)
        s = coerce_str(v)
        if s:
            return s
    return ""
