"""Batched content extraction for trend articles."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from common.config import ExtractionConfig
from common.errors import RenderError
from common.models import Article, ArticleState, Trend
from extract_content.models import ExtractionSummary, RenderedPage, TaskOutcome
from extract_content.renderer import Renderer, SecondarySource

logger = logging.getLogger(__name__)


def make_batches(articles: list[Article], batch_size: Optional[int]) -> list[list[Article]]:
    """Split articles into consecutive batches. No batch size means a single batch."""
    if not articles:
        return []
    if not batch_size:
        return [list(articles)]
    return [articles[i:i + batch_size] for i in range(0, len(articles), batch_size)]


async def run_task_group(
    articles: list[Article],
    task: Callable[[Article], Awaitable[TaskOutcome]],
) -> list[TaskOutcome]:
    """Run one task per article concurrently and wait for all of them to settle.

    Outcomes are returned in article order. An exception escaping a task is
    recorded as a failed outcome for that article only.
    """
    results = await asyncio.gather(*(task(article) for article in articles), return_exceptions=True)

    outcomes = []
    for article, result in zip(articles, results):
        if isinstance(result, BaseException):
            article.state = ArticleState.EXTRACTION_FAILED
            outcomes.append(TaskOutcome(article=article, ok=False, error=result))
        else:
            outcomes.append(result)
    return outcomes


def apply_rendered_page(article: Article, page: RenderedPage) -> None:
    if page.title:
        article.title = page.title
    article.description = page.description
    article.content = page.content
    article.markup = page.markup
    article.state = ArticleState.EXTRACTED


class ExtractionScheduler:
    """Drive rendering for every article of the leading trends.

    Each trend's articles are processed in batches. All tasks of a batch run
    concurrently and the next batch starts only once every task has settled.
    A failing or slow article never affects its siblings.
    """

    def __init__(
        self,
        renderer: Renderer,
        secondary_source: Optional[SecondarySource] = None,
        config: Optional[ExtractionConfig] = None,
        enrich: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.renderer = renderer
        self.secondary_source = secondary_source
        self.config = config or ExtractionConfig()
        self.enrich = enrich
        self._sleep = sleep

    async def _render(self, url: str, timeout_ms: int) -> RenderedPage:
        async with self.renderer.session() as session:
            return await session.render(url, timeout_ms)

    async def extract_article(self, article: Article) -> TaskOutcome:
        """Render one article in its own session. Never raises RenderError.

        The timeout bounds opening, rendering and releasing the session.
        """
        url = article.source_url
        timeout_ms = self.config.render_timeout_ms
        try:
            page = await asyncio.wait_for(self._render(url, timeout_ms), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            error = RenderError(url, f"timed out after {timeout_ms} ms")
        except RenderError as e:
            error = e
        except Exception as e:
            error = RenderError(url, str(e))
        else:
            apply_rendered_page(article, page)
            logger.info(" Extracted %s (%s)", article.title, url)
            return TaskOutcome(article=article, ok=True)

        article.state = ArticleState.EXTRACTION_FAILED
        logger.warning(" Failed to extract content from %s: %s", url, error.reason)
        return TaskOutcome(article=article, ok=False, error=error)

    async def enrich_trend(self, trend: Trend) -> bool:
        """Attach secondary-source pages to the trend. Failures are logged and skipped."""
        if self.secondary_source is None or not self.enrich:
            return False
        try:
            pages = await self.secondary_source.lookup(trend.title)
        except Exception as e:
            logger.warning("Enrichment failed for %s: %s", trend.title, e)
            return False
        trend.auxiliary_content = list(pages or [])
        return bool(trend.auxiliary_content)

    async def extract_trend(self, trend: Trend, summary: ExtractionSummary) -> None:
        logger.info("Extracting all content for %s", trend.title)
        for batch in make_batches(trend.articles, self.config.batch_size):
            outcomes = await run_task_group(batch, self.extract_article)
            for outcome in outcomes:
                if outcome.ok:
                    summary.succeeded += 1
                else:
                    summary.failed += 1
            await self._sleep(self.config.batch_delay_ms / 1000)

        if await self.enrich_trend(trend):
            summary.trends_enriched += 1
        summary.trends_processed += 1

    async def extract(self, trends: Iterable[Trend]) -> ExtractionSummary:
        """Extract content for the first ``max_trends`` trends, in order."""
        summary = ExtractionSummary()
        for trend in list(trends)[: self.config.max_trends]:
            await self.extract_trend(trend, summary)

        logger.info(
            "Extraction finished: %d of %d articles succeeded, %d failed across %d trends",
            summary.succeeded,
            summary.attempted,
            summary.failed,
            summary.trends_processed,
        )
        return summary
