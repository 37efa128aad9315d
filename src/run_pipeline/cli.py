"""CLI for running the trends pipeline end to end."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import Config, load_config
from common.errors import TrendSourceExhaustedError
from extract_content.playwright_renderer import PlaywrightRenderer
from extract_content.wikipedia import WikipediaClient
from fetch_trends.google_trends import GoogleTrendsClient
from run_pipeline.helpers import apply_cli_overrides, build_snapshot_writer, parse_run_pipeline_args
from run_pipeline.pipeline import PipelineResult, SnapshotWriter, run_pipeline

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


async def _run(config: Config, snapshot_writer: SnapshotWriter | None) -> PipelineResult:
    trend_source = GoogleTrendsClient(
        geo=config.trends.geo,
        request_timeout=config.trends.request_timeout,
        fetch_delay_ms=config.trends.fetch_delay_ms,
    )
    wikipedia = WikipediaClient(
        search_limit=config.enrichment.search_limit,
        max_pages=config.enrichment.max_pages,
        request_timeout=config.enrichment.request_timeout,
        delay_ms=config.enrichment.delay_ms,
    )
    try:
        async with PlaywrightRenderer() as renderer:
            return await run_pipeline(
                config,
                trend_source,
                renderer,
                secondary_source=wikipedia,
                snapshot_writer=snapshot_writer,
            )
    finally:
        trend_source.close()
        wikipedia.close()


def main() -> None:
    args = parse_run_pipeline_args()
    config = apply_cli_overrides(load_config(args.config), args)

    try:
        result = asyncio.run(_run(config, build_snapshot_writer(args, config)))
    except TrendSourceExhaustedError as e:
        logger.error("Nothing to process: %s", e)
        sys.exit(1)

    analyzed = sum(
        1 for trend in result.trends for article in trend.articles if article.analysis is not None
    )
    logger.info(
        "Run complete: %d trends, %d articles extracted, %d failed, %d analyzed",
        len(result.trends),
        result.summary.succeeded,
        result.summary.failed,
        analyzed,
    )


if __name__ == "__main__":
    main()
