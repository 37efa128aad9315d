"""Tests for fetch_trends.google_trends module."""

import json
from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from common.errors import TrendSourceError
from fetch_trends.google_trends import GoogleTrendsClient, parse_daily_trends


def _payload(*searches: dict) -> str:
    body = {"default": {"trendingSearchesDays": [{"date": "20240501", "trendingSearches": list(searches)}]}}
    return ")]}',\n" + json.dumps(body)


SEARCH = {
    "title": {"query": "Solar Eclipse"},
    "formattedTraffic": "500K+",
    "relatedQueries": [{"query": "eclipse glasses"}, {"query": ""}],
    "articles": [
        {
            "title": "Millions watch the eclipse &amp; cheer",
            "timeAgo": "3h ago",
            "source": "AP",
            "url": "https://apnews.com/eclipse",
            "snippet": "It&#39;s here.",
        },
        {"title": "No URL", "timeAgo": "1h ago"},
    ],
}


class TestParseDailyTrends:
    def test_parses_trend_fields(self) -> None:
        trends = parse_daily_trends(_payload(SEARCH))

        assert len(trends) == 1
        trend = trends[0]
        assert trend.title == "Solar Eclipse"
        assert trend.related_terms == ["eclipse glasses"]
        assert len(trend.articles) == 1

        article = trend.articles[0]
        assert article.title == "Millions watch the eclipse & cheer"
        assert article.source_url == "https://apnews.com/eclipse"
        assert article.relative_age == "3h ago"
        assert article.snippet == "It's here."
        assert article.source == "AP"

    def test_accepts_body_without_prefix(self) -> None:
        body = _payload(SEARCH).split("\n", 1)[1]
        assert len(parse_daily_trends(body)) == 1

    def test_skips_searches_without_title(self) -> None:
        assert parse_daily_trends(_payload({"title": {}, "articles": []})) == []

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(TrendSourceError):
            parse_daily_trends(")]}',\n<html>")

    def test_unexpected_shape_raises(self) -> None:
        with pytest.raises(TrendSourceError):
            parse_daily_trends(json.dumps({"other": {}}))


class TestGoogleTrendsClient:
    def _client(self, session: Mock) -> GoogleTrendsClient:
        return GoogleTrendsClient(geo="US", fetch_delay_ms=0, session=session)

    def test_fetch_daily_trends_requests_date(self) -> None:
        session = Mock()
        session.get.return_value.text = _payload(SEARCH)

        trends = self._client(session).fetch_daily_trends(date(2024, 5, 1))

        assert trends[0].title == "Solar Eclipse"
        params = session.get.call_args.kwargs["params"]
        assert params["ed"] == "20240501"
        assert params["geo"] == "US"

    @patch("fetch_trends.google_trends.time.sleep")
    def test_fetch_raw_trends_covers_each_day(self, mock_sleep) -> None:
        session = Mock()
        session.get.return_value.text = _payload(SEARCH)

        trends = self._client(session).fetch_raw_trends(date(2024, 5, 1), date(2024, 5, 2))

        assert len(trends) == 2
        assert session.get.call_count == 2
        assert mock_sleep.call_count == 2

    @patch("fetch_trends.google_trends.time.sleep")
    def test_fetch_raw_trends_skips_failed_days(self, mock_sleep) -> None:
        ok = Mock()
        ok.text = _payload(SEARCH)
        failing = Mock()
        failing.raise_for_status.side_effect = requests.HTTPError("429")
        session = Mock()
        session.get.side_effect = [failing, ok]

        trends = self._client(session).fetch_raw_trends(date(2024, 5, 1), date(2024, 5, 2))

        assert len(trends) == 1

    @patch("fetch_trends.google_trends.time.sleep")
    def test_fetch_raw_trends_skips_malformed_days(self, mock_sleep) -> None:
        session = Mock()
        session.get.return_value.text = "not json"

        assert self._client(session).fetch_raw_trends(date(2024, 5, 1), date(2024, 5, 1)) == []
