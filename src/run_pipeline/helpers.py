"""Helper functions for the run_pipeline CLI."""

from __future__ import annotations

import argparse
from typing import Optional

from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import non_negative_int, positive_int
from common.config import Config
from common.local_io import save_json_snapshot_local
from common.models import Trend
from run_pipeline.pipeline import SnapshotWriter


def parse_run_pipeline_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for run_pipeline."""

    parser = argparse.ArgumentParser(description="Fetch trends, extract their articles and analyze them.")

    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: $CONFIG_ENV or prod)",
    )

    # Trend options
    parser.add_argument("--days-in-past", type=non_negative_int, default=None,
                        help="Fetch trends from this many days back until today")
    parser.add_argument("--geo", default=None, help="Trend region code (e.g. US)")

    # Extraction options
    parser.add_argument("--max-trends", type=positive_int, default=None,
                        help="Number of leading trends to extract")
    parser.add_argument("--batch-size", type=positive_int, default=None,
                        help="Articles rendered concurrently per batch (default: all)")
    parser.add_argument("--render-timeout-ms", type=positive_int, default=None,
                        help="Per-article render timeout in milliseconds")
    parser.add_argument("--batch-delay-ms", type=non_negative_int, default=None,
                        help="Pause between batches in milliseconds")
    parser.add_argument("--no-enrich", action="store_true",
                        help="Skip Wikipedia enrichment of trends")

    # Output options
    parser.add_argument("--load-local", action="store_true", help="Save stage snapshots to local JSON files")
    parser.add_argument("--load-s3", action="store_true", help="Upload stage snapshots to S3")
    parser.add_argument("--output-dir", default=None, help="Directory for local snapshots")

    return parser.parse_args(argv)


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Override config values with the CLI flags that were given."""
    if args.days_in_past is not None:
        config.trends.days_in_past = args.days_in_past
    if args.geo:
        config.trends.geo = args.geo
    if args.max_trends is not None:
        config.extraction.max_trends = args.max_trends
    if args.batch_size is not None:
        config.extraction.batch_size = args.batch_size
    if args.render_timeout_ms is not None:
        config.extraction.render_timeout_ms = args.render_timeout_ms
    if args.batch_delay_ms is not None:
        config.extraction.batch_delay_ms = args.batch_delay_ms
    if args.no_enrich:
        config.enrichment.enabled = False
    if args.output_dir:
        config.output.local_dir = args.output_dir
    return config


def build_snapshot_writer(args: argparse.Namespace, config: Config) -> Optional[SnapshotWriter]:
    """Build a writer that saves each stage snapshot to the requested outputs."""
    if not args.load_local and not args.load_s3:
        return None

    def write(trends: list[Trend], name: str) -> None:
        if args.load_local:
            save_json_snapshot_local(trends, name, output_dir=config.output.local_dir)
        if args.load_s3:
            upload_jsonl_records_to_s3(trends, name, root=config.output.s3_prefix)

    return write
