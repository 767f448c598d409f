"""Detect the secret phrases that switch a chat into admin mode."""

from __future__ import annotations

from typing import Iterable, Optional

from utils.settings import DEFAULT_TRIGGER_CODES

ADMIN_TRIGGER_CODES = DEFAULT_TRIGGER_CODES


def is_admin_trigger(text: Optional[str], codes: Iterable[str] = ADMIN_TRIGGER_CODES) -> bool:
    """Return True when any trigger code appears anywhere in `text`, ignoring case."""
    lowered = (text or "").lower()
    return any(code.lower() in lowered for code in codes if code)
