"""Tests for extract_content.wikipedia module."""

import asyncio
from unittest.mock import Mock, patch

import pytest
import requests

from common.errors import EnrichmentError
from common.models import SecondarySourcePage
from extract_content.wikipedia import WikipediaClient


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    return response


SEARCH_RESPONSE = {"query": {"search": [{"pageid": 1}, {"pageid": 2}, {"pageid": 3}]}}


def _parse_response(page_id):
    return {
        "parse": {
            "title": f"Page {page_id}",
            "text": {"*": f"<div class='mw-parser-output' style='x'><p>Text {page_id}</p><style>p {{}}</style></div>"},
        }
    }


class TestWikipediaClient:
    def _client(self, session, **kwargs) -> WikipediaClient:
        return WikipediaClient(session=session, delay_ms=0, **kwargs)

    def test_search_returns_page_ids(self) -> None:
        session = Mock()
        session.get.return_value = _response(SEARCH_RESPONSE)

        assert self._client(session).search("eclipse") == [1, 2, 3]
        params = session.get.call_args.kwargs["params"]
        assert params["srsearch"] == "eclipse"
        assert params["format"] == "json"

    def test_search_without_query_raises(self) -> None:
        session = Mock()
        session.get.return_value = _response({"error": "bad"})

        with pytest.raises(EnrichmentError):
            self._client(session).search("eclipse")

    def test_fetch_page_returns_plain_text(self) -> None:
        session = Mock()
        session.get.return_value = _response(_parse_response(7))

        page = self._client(session).fetch_page(7)

        assert page == SecondarySourcePage(title="Page 7", content="Text 7")

    @patch("extract_content.wikipedia.time.sleep")
    def test_lookup_fetches_at_most_max_pages(self, mock_sleep) -> None:
        session = Mock()
        session.get.side_effect = [
            _response(SEARCH_RESPONSE),
            _response(_parse_response(1)),
            _response(_parse_response(2)),
        ]

        pages = self._client(session, max_pages=2).lookup_sync("eclipse")

        assert [p.title for p in pages] == ["Page 1", "Page 2"]
        assert session.get.call_count == 3

    def test_short_query_skips_lookup(self) -> None:
        session = Mock()
        assert self._client(session).lookup_sync("a") == []
        session.get.assert_not_called()

    @patch("extract_content.wikipedia.time.sleep")
    def test_request_failure_raises_enrichment_error(self, mock_sleep) -> None:
        session = Mock()
        session.get.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(EnrichmentError):
            self._client(session).lookup_sync("eclipse")

    @patch("extract_content.wikipedia.time.sleep")
    def test_async_lookup(self, mock_sleep) -> None:
        session = Mock()
        session.get.side_effect = [
            _response({"query": {"search": [{"pageid": 1}]}}),
            _response(_parse_response(1)),
        ]

        pages = asyncio.run(self._client(session).lookup("eclipse"))

        assert pages == [SecondarySourcePage(title="Page 1", content="Text 1")]
