"""Resolve relative "time since published" strings into absolute timestamps."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

from common.errors import ParseError

logger = logging.getLogger(__name__)

_MINUTE_MS = 60 * 1000
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS
_WEEK_MS = 7 * _DAY_MS

UNIT_MILLIS = {
    "m": _MINUTE_MS,
    "h": _HOUR_MS,
    "d": _DAY_MS,
    "w": _WEEK_MS,
    "week": _WEEK_MS,
    "mo": 30 * _DAY_MS,
    "y": 365 * _DAY_MS,
}

# Unknown or missing units count as milliseconds, so e.g. "3 days ago"
# resolves to three milliseconds before now.
FALLBACK_UNIT_MS = 1
FALLBACK_MAGNITUDE = 1

_MAGNITUDE_RE = re.compile(r"^\s*([+-]?\d+)")
_AGO_RE = re.compile(r"\s*ago\s*$")


def parse_relative_age(relative_age: str) -> tuple[int, str]:
    """Split a relative age such as "2h ago" into (magnitude, unit token).

    Raises:
        ParseError: If no leading integer magnitude is present.
    """
    if not isinstance(relative_age, str):
        raise ParseError(f"Relative age must be a string, got {type(relative_age).__name__}")

    text = _AGO_RE.sub("", relative_age)
    match = _MAGNITUDE_RE.match(text)
    unit = re.sub(r"\d+", "", text).strip().lstrip("+-").strip()
    if not match:
        raise ParseError(f"No magnitude in relative age {relative_age!r}")
    return int(match.group(1)), unit


def unit_to_millis(unit: str) -> int:
    return UNIT_MILLIS.get(unit, FALLBACK_UNIT_MS)


def resolve_relative_age(relative_age: str, now: datetime) -> datetime:
    """Resolve a relative age against ``now``.

    Never raises: input without a magnitude counts as one unit, and unknown
    units count as one millisecond, so unreadable ages sort as the freshest.
    Ages beyond the representable date range resolve to ``datetime.min``.
    """
    try:
        magnitude, unit = parse_relative_age(relative_age)
    except ParseError as e:
        logger.debug("Falling back for relative age: %s", e)
        magnitude = FALLBACK_MAGNITUDE
        unit = ""
        if isinstance(relative_age, str):
            unit = _AGO_RE.sub("", relative_age).strip()

    try:
        return now - timedelta(milliseconds=magnitude * unit_to_millis(unit))
    except OverflowError:
        logger.debug("Relative age %r is out of range, treating as oldest", relative_age)
        return datetime.min.replace(tzinfo=now.tzinfo)
