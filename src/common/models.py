"""Data models shared by every stage of the trends pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ArticleState(str, Enum):
    """Lifecycle of an article within one pipeline run."""
    PENDING = "pending"
    EXTRACTED = "extracted"
    EXTRACTION_FAILED = "extraction_failed"
    ANALYZED = "analyzed"
    ANALYSIS_SKIPPED = "analysis_skipped"


@dataclass(frozen=True)
class PageMetadata:
    """Title, description and keywords read from a page's <head>."""
    title: str
    description: str
    keywords: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EmbedDescriptor:
    """A social media embed found in a page."""
    src: str
    html: str


@dataclass(frozen=True)
class AnalysisRecord:
    """Structured analysis of one extracted article."""
    metadata: PageMetadata
    structured_data: Optional[Any]
    embeds: dict[str, list[EmbedDescriptor]]
    keyword_set: list[str]
    word_count: int
    content_structure: dict[str, Any] = field(default_factory=dict)
    links: dict[str, Any] = field(default_factory=dict)
    questions: list[str] = field(default_factory=list)
    images: list[dict[str, str]] = field(default_factory=list)
    videos: list[dict[str, str]] = field(default_factory=list)


@dataclass
class Article:
    """News article attached to a trend."""
    title: str
    source_url: str
    relative_age: str
    snippet: str = ""
    source: Optional[str] = None
    state: ArticleState = ArticleState.PENDING
    description: Optional[str] = None
    content: Optional[str] = None
    markup: Optional[str] = None
    analysis: Optional[AnalysisRecord] = None


@dataclass(frozen=True)
class SecondarySourcePage:
    """Background page for a trend (e.g. a Wikipedia article)."""
    title: str
    content: str


@dataclass
class Trend:
    """A trending topic with its related search terms and articles."""
    title: str
    related_terms: list[str] = field(default_factory=list)
    articles: list[Article] = field(default_factory=list)
    auxiliary_content: list[SecondarySourcePage] = field(default_factory=list)
