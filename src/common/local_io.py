"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_json_snapshot_local(
    records: list[Any],
    name: str,
    output_dir: str = "data",
) -> Path:
    """
    Save a list of dataclass records to a local JSON snapshot.

    The file is overwritten on every run, so each stage always has one
    current snapshot (e.g. data/trends.json).

    Args:
        records: List of dataclass objects to save
        name: Snapshot name without extension (e.g. "trends_with_content")
        output_dir: Directory to save to (default: "data")

    Returns:
        Path to the written file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / f"{name}.json"

    serialized = [serialize_dataclass(record) for record in records]
    with filepath.open("w", encoding="utf-8") as f:
        json.dump(serialized, f, default=str, ensure_ascii=False, indent=2)

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
