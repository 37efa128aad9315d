"""Sequence the trends pipeline: fetch, normalize, extract, analyze."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from analyze_content.analyze_content import analyze_trends
from common.config import Config
from common.models import Trend
from extract_content.models import ExtractionSummary
from extract_content.renderer import Renderer, SecondarySource
from extract_content.scheduler import ExtractionScheduler
from fetch_trends.fetch_trends import TrendSource, fetch_trends

logger = logging.getLogger(__name__)

SnapshotWriter = Callable[[list[Trend], str], None]


@dataclass
class PipelineResult:
    trends: list[Trend]
    summary: ExtractionSummary


def _write_snapshot(writer: Optional[SnapshotWriter], trends: list[Trend], name: str) -> None:
    if writer is None:
        return
    writer(trends, name)
    logger.info("Trends data has been written to snapshot %s", name)


async def run_pipeline(
    config: Config,
    trend_source: TrendSource,
    renderer: Renderer,
    secondary_source: Optional[SecondarySource] = None,
    snapshot_writer: Optional[SnapshotWriter] = None,
    now: Optional[datetime] = None,
) -> PipelineResult:
    """Run every stage once.

    Raises:
        TrendSourceExhaustedError: If the trend source returned nothing.
    """
    trends = await asyncio.to_thread(fetch_trends, trend_source, config.trends.days_in_past, now)
    _write_snapshot(snapshot_writer, trends, "trends")

    scheduler = ExtractionScheduler(
        renderer,
        secondary_source=secondary_source,
        config=config.extraction,
        enrich=config.enrichment.enabled,
    )
    summary = await scheduler.extract(trends)
    _write_snapshot(snapshot_writer, trends, "trends_with_content")

    analyzed = analyze_trends(trends, max_trends=config.analysis.max_trends)
    _write_snapshot(snapshot_writer, analyzed, "trends_with_analysis")

    return PipelineResult(trends=analyzed, summary=summary)
