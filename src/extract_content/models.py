"""Data models for the extract_content pipeline stage."""

from dataclasses import dataclass
from typing import Optional

from common.models import Article


@dataclass(frozen=True)
class RenderedPage:
    """Content returned by a renderer for one URL."""
    title: str
    description: Optional[str]
    content: Optional[str]
    markup: str


@dataclass
class TaskOutcome:
    """Result of one extraction task, tagged success or failure."""
    article: Article
    ok: bool
    error: Optional[BaseException] = None


@dataclass
class ExtractionSummary:
    """Counts reported at the end of an extraction run."""
    succeeded: int = 0
    failed: int = 0
    trends_processed: int = 0
    trends_enriched: int = 0

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed
