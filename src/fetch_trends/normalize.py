"""Deduplicate and order raw trends by recency."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Optional

from common.models import Article, Trend
from fetch_trends.recency import resolve_relative_age

logger = logging.getLogger(__name__)


def dedupe_trends(trends: list[Trend]) -> list[Trend]:
    """Keep the first trend for each title, dropping later duplicates unmerged."""
    seen: set[str] = set()
    unique = []
    for trend in trends:
        if trend.title in seen:
            logger.debug("Dropping duplicate trend: %s", trend.title)
            continue
        seen.add(trend.title)
        unique.append(trend)
    return unique


def dedupe_articles(articles: list[Article]) -> list[Article]:
    """Keep the first article for each source URL."""
    seen: set[str] = set()
    unique = []
    for article in articles:
        if article.source_url in seen:
            continue
        seen.add(article.source_url)
        unique.append(article)
    return unique


def sort_articles(articles: list[Article], now: datetime) -> list[Article]:
    """Sort articles newest first. Equal ages keep their input order."""
    return sorted(
        articles,
        key=lambda a: resolve_relative_age(a.relative_age, now),
        reverse=True,
    )


def _compare_trends(a: Trend, b: Trend, now: datetime) -> int:
    # Trends without articles compare equal to everything.
    if not a.articles or not b.articles:
        return 0
    newest_a = resolve_relative_age(a.articles[0].relative_age, now)
    newest_b = resolve_relative_age(b.articles[0].relative_age, now)
    if newest_a > newest_b:
        return -1
    if newest_a < newest_b:
        return 1
    return 0


def sort_trends(trends: list[Trend], now: datetime) -> list[Trend]:
    """Sort trends by their newest article, newest first."""
    return sorted(trends, key=cmp_to_key(lambda a, b: _compare_trends(a, b, now)))


def normalize_trends(raw_trends: list[Trend], now: Optional[datetime] = None) -> list[Trend]:
    """Deduplicate trends and order them (and their articles) by recency.

    Args:
        raw_trends: Trends as returned by the trend source, possibly duplicated
        now: Reference instant for resolving relative ages (default: current UTC time)

    Returns:
        New list of trends; input trend objects are not modified.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    unique = dedupe_trends(raw_trends)
    normalized = [
        replace(trend, articles=sort_articles(dedupe_articles(trend.articles), now))
        for trend in unique
    ]

    if len(unique) != len(raw_trends):
        logger.info("Removed %d duplicate trends", len(raw_trends) - len(unique))

    return sort_trends(normalized, now)
