"""Configuration loader for the trends pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


@dataclass
class TrendsConfig:
    days_in_past: int = 1
    geo: str = "US"
    request_timeout: int = 30
    fetch_delay_ms: int = 500


@dataclass
class ExtractionConfig:
    max_trends: int = 3
    batch_size: Optional[int] = None  # None = all articles of a trend in one batch
    render_timeout_ms: int = 12000
    batch_delay_ms: int = 500


@dataclass
class EnrichmentConfig:
    enabled: bool = True
    search_limit: int = 5
    max_pages: int = 3
    request_timeout: int = 10
    delay_ms: int = 1000


@dataclass
class AnalysisConfig:
    max_trends: Optional[int] = None  # None = analyze every extracted trend


@dataclass
class OutputConfig:
    local_dir: str = "data"
    s3_prefix: str = "trends_pipeline"


@dataclass
class Config:
    trends: TrendsConfig = field(default_factory=TrendsConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config_path(config_name: str | None, config_dir: Path = CONFIG_DIR) -> Path:
    """Find config file path, checking the CONFIG_ENV env var and the default.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get("CONFIG_ENV", "prod")

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> Config:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".
        config_dir: Directory containing config files

    Returns:
        Loaded Config object
    """
    config_path = find_config_path(config_name, config_dir)

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object, defaulting missing keys."""
    trends = data.get("trends") or {}
    extraction = data.get("extraction") or {}
    enrichment = data.get("enrichment") or {}
    analysis = data.get("analysis") or {}
    output = data.get("output") or {}

    return Config(
        trends=TrendsConfig(
            days_in_past=trends.get("days_in_past", 1),
            geo=trends.get("geo", "US"),
            request_timeout=trends.get("request_timeout", 30),
            fetch_delay_ms=trends.get("fetch_delay_ms", 500),
        ),
        extraction=ExtractionConfig(
            max_trends=extraction.get("max_trends", 3),
            batch_size=extraction.get("batch_size"),
            render_timeout_ms=extraction.get("render_timeout_ms", 12000),
            batch_delay_ms=extraction.get("batch_delay_ms", 500),
        ),
        enrichment=EnrichmentConfig(
            enabled=enrichment.get("enabled", True),
            search_limit=enrichment.get("search_limit", 5),
            max_pages=enrichment.get("max_pages", 3),
            request_timeout=enrichment.get("request_timeout", 10),
            delay_ms=enrichment.get("delay_ms", 1000),
        ),
        analysis=AnalysisConfig(
            max_trends=analysis.get("max_trends"),
        ),
        output=OutputConfig(
            local_dir=output.get("local_dir", "data"),
            s3_prefix=output.get("s3_prefix", "trends_pipeline"),
        ),
    )
