"""Google Trends daily trends client."""

from __future__ import annotations

import html
import json
import logging
import time
from datetime import date, timedelta
from typing import Any, Optional

import requests

from common.errors import TrendSourceError
from common.models import Article, Trend

logger = logging.getLogger(__name__)

DAILY_TRENDS_URL = "https://trends.google.com/trends/api/dailytrends"
USER_AGENT = "trends-pipeline/1.0"
XSSI_PREFIX = ")]}',"


def _text(value: Any) -> str:
    return html.unescape(value).strip() if isinstance(value, str) else ""


def parse_daily_trends(payload: str) -> list[Trend]:
    """Parse a daily trends response body into raw Trend records.

    Raises:
        TrendSourceError: If the body is not the expected JSON document.
    """
    body = payload.strip()
    if body.startswith(XSSI_PREFIX):
        body = body[len(XSSI_PREFIX):]

    try:
        data = json.loads(body)
        days = data["default"]["trendingSearchesDays"]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise TrendSourceError(f"Unexpected daily trends response: {e}") from e

    trends = []
    for day in days:
        for search in day.get("trendingSearches", []):
            title = _text((search.get("title") or {}).get("query"))
            if not title:
                continue
            related_terms = [
                _text(q.get("query"))
                for q in search.get("relatedQueries", [])
                if _text(q.get("query"))
            ]
            articles = [
                Article(
                    title=_text(a.get("title")),
                    source_url=a.get("url", ""),
                    relative_age=a.get("timeAgo", ""),
                    snippet=_text(a.get("snippet")),
                    source=_text(a.get("source")) or None,
                )
                for a in search.get("articles", [])
                if a.get("url")
            ]
            trends.append(Trend(title=title, related_terms=related_terms, articles=articles))
    return trends


class GoogleTrendsClient:
    """Fetch raw, unnormalized daily trends for a date window."""

    def __init__(
        self,
        geo: str = "US",
        request_timeout: int = 30,
        fetch_delay_ms: int = 500,
        session: Optional[requests.Session] = None,
    ):
        self.geo = geo
        self.request_timeout = request_timeout
        self.fetch_delay_ms = fetch_delay_ms
        self.session = session or requests.Session()

    def fetch_daily_trends(self, trend_date: date) -> list[Trend]:
        response = self.session.get(
            DAILY_TRENDS_URL,
            params={
                "hl": "en-US",
                "tz": 0,
                "ed": trend_date.strftime("%Y%m%d"),
                "geo": self.geo,
                "ns": 15,
            },
            timeout=self.request_timeout,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
        return parse_daily_trends(response.text)

    def fetch_raw_trends(self, start: date, end: date) -> list[Trend]:
        """Fetch every day from start to end (inclusive). Failed days are skipped."""
        all_trends: list[Trend] = []
        day = start
        while day <= end:
            try:
                trends = self.fetch_daily_trends(day)
                all_trends.extend(trends)
                logger.info("Fetched %d trends for %s", len(trends), day.isoformat())
                for index, trend in enumerate(trends, 1):
                    logger.debug("  %d. %s", index, trend.title)
                time.sleep(self.fetch_delay_ms / 1000)
            except (requests.RequestException, TrendSourceError) as e:
                logger.error("Failed to fetch trends for %s: %s", day.isoformat(), e)
            day += timedelta(days=1)
        return all_trends

    def close(self) -> None:
        self.session.close()
