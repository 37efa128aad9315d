"""Fetch and normalize trends for a lookback window."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol

from common.errors import TrendSourceExhaustedError
from common.models import Trend
from fetch_trends.normalize import normalize_trends

logger = logging.getLogger(__name__)


class TrendSource(Protocol):
    def fetch_raw_trends(self, start: date, end: date) -> list[Trend]:
        ...


def fetch_trends(
    source: TrendSource,
    days_in_past: int,
    now: Optional[datetime] = None,
) -> list[Trend]:
    """Fetch raw trends from the source and return them deduplicated and sorted.

    Raises:
        TrendSourceExhaustedError: If the source returned no trends at all.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    end = now.date()
    start = end - timedelta(days=days_in_past)

    raw_trends = source.fetch_raw_trends(start, end)
    if not raw_trends:
        raise TrendSourceExhaustedError(
            f"No trends returned between {start.isoformat()} and {end.isoformat()}"
        )

    trends = normalize_trends(raw_trends, now=now)
    logger.info(
        "Fetched data for %d unique trends from %s to %s",
        len(trends),
        start.isoformat(),
        end.isoformat(),
    )
    return trends
