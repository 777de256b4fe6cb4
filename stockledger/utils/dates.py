"""Date normalization for movement timestamps.

Stored movement dates are canonical UTC strings with millisecond precision,
e.g. ``2025-09-29T17:30:00.000Z``. Input may be any ISO-8601 date or
date-time, or the legacy ``DD/MM/YYYY[ HH:mm[:ss]]`` form, which is read in
local time.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

LEGACY_PATTERN = re.compile(
    r"^(\d{2})/(\d{2})/(\d{4})(?:[ T](\d{2}):(\d{2})(?::(\d{2}))?)?$"
)
DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_canonical(value: datetime) -> str:
    """Format an aware (or local naive) datetime as canonical UTC."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return to_canonical(datetime.now(timezone.utc))


def _parse_iso(text: str) -> datetime | None:
    candidate = text[:-1] + "+00:00" if text[-1] in "zZ" else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None

    if parsed.tzinfo is None and DATE_ONLY_PATTERN.match(text):
        # Bare dates are UTC midnight; naive date-times stay local.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_legacy(text: str) -> datetime | None:
    match = LEGACY_PATTERN.match(text)
    if not match:
        return None

    day, month, year = int(match[1]), int(match[2]), int(match[3])
    hour, minute, second = (int(part) if part else 0 for part in match.groups()[3:])
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def normalize_date(raw: Any) -> str | None:
    """Return the canonical form of ``raw``, or None when it cannot be read.

    Never raises: blank input, non-strings and impossible components
    (month 13, 31/02) all yield None so the caller picks the fallback.
    """
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None

    parsed = _parse_iso(text) or _parse_legacy(text)
    if parsed is None:
        return None
    try:
        return to_canonical(parsed)
    except (OverflowError, ValueError):
        return None


def normalize_or_now(raw: Any) -> str:
    """Normalize for a fresh write: unreadable dates become the current time."""
    return normalize_date(raw) or now_iso()


def normalize_or(raw: Any, fallback: str) -> str:
    """Normalize for an edit: unreadable dates keep ``fallback``."""
    return normalize_date(raw) or fallback
