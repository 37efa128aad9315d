"""Wikipedia lookup used to enrich trends with background content."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import requests

from common.errors import EnrichmentError
from common.html_text import html_to_text, strip_presentation
from common.models import SecondarySourcePage

logger = logging.getLogger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
USER_AGENT = "trends-pipeline/1.0 (trend enrichment)"
MIN_QUERY_LENGTH = 2


class WikipediaClient:
    """Search Wikipedia for a topic and return the text of the best matches."""

    def __init__(
        self,
        search_limit: int = 5,
        max_pages: int = 3,
        request_timeout: int = 10,
        delay_ms: int = 1000,
        session: Optional[requests.Session] = None,
    ):
        self.search_limit = search_limit
        self.max_pages = max_pages
        self.request_timeout = request_timeout
        self.delay_ms = delay_ms
        self.session = session or requests.Session()

    def _get(self, params: dict) -> dict:
        response = self.session.get(
            WIKIPEDIA_API_URL,
            params={"format": "json", **params},
            timeout=self.request_timeout,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
        return response.json()

    def search(self, query: str) -> list[int]:
        data = self._get({
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": self.search_limit,
        })
        if "query" not in data:
            raise EnrichmentError(f"Invalid search response for {query!r}")
        return [result["pageid"] for result in data["query"].get("search", [])]

    def fetch_page(self, page_id: int) -> SecondarySourcePage:
        data = self._get({
            "action": "parse",
            "prop": "text",
            "redirects": "true",
            "pageid": page_id,
        })
        parsed = data.get("parse")
        if not parsed:
            raise EnrichmentError(f"Invalid parse response for page {page_id}")

        markup = strip_presentation(parsed["text"]["*"], drop_classes=True)
        return SecondarySourcePage(title=parsed["title"], content=html_to_text(markup))

    def lookup_sync(self, topic: str) -> list[SecondarySourcePage]:
        """Blocking lookup.

        Raises:
            EnrichmentError: If Wikipedia is unreachable or answers unexpectedly.
        """
        if len(topic) < MIN_QUERY_LENGTH:
            logger.info("Query too short for Wikipedia lookup: %r", topic)
            return []

        time.sleep(self.delay_ms / 1000)
        logger.info("Fetching Wikipedia data for %s", topic)

        try:
            page_ids = self.search(topic)
            return [self.fetch_page(page_id) for page_id in page_ids[: self.max_pages]]
        except (requests.RequestException, KeyError, ValueError) as e:
            raise EnrichmentError(f"Wikipedia lookup failed for {topic!r}: {e}") from e

    async def lookup(self, topic: str) -> list[SecondarySourcePage]:
        return await asyncio.to_thread(self.lookup_sync, topic)

    def close(self) -> None:
        self.session.close()
