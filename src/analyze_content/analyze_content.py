"""Turn extracted article markup into structured analysis records."""

import logging
from dataclasses import replace
from typing import Optional

from lxml import html as lxml_html

from analyze_content.extractors import (
    extract_content_structure,
    extract_images,
    extract_links,
    extract_metadata,
    extract_questions,
    extract_social_media_embeds,
    extract_structured_data,
    extract_videos,
    safe_extractor,
)
from analyze_content.keywords import keywords_from_structured_data, normalize_keywords
from common.html_text import html_to_text, parse_html, strip_links, strip_presentation
from common.models import AnalysisRecord, Article, ArticleState, Trend

logger = logging.getLogger(__name__)


def _empty_document():
    return lxml_html.fragment_fromstring("<div></div>")


@safe_extractor(_empty_document)
def _parse_or_empty(markup: Optional[str]):
    document = parse_html(markup)
    if document is None:
        return _empty_document()
    return document


@safe_extractor(str)
def clean_markup(markup: Optional[str]) -> str:
    return strip_presentation(markup)


@safe_extractor(str)
def to_canonical_text(content: Optional[str]) -> str:
    """Plain text of rich content with links reduced to their text, on one line."""
    return " ".join(html_to_text(strip_links(content)).splitlines())


def count_words(text: str) -> int:
    return len(text.split())


def build_analysis(markup: str, content: str, page_url: Optional[str] = None) -> tuple[AnalysisRecord, str]:
    """Analyze raw page markup and rich content.

    Returns:
        The analysis record and the canonical plain-text content.
    """
    page = _parse_or_empty(clean_markup(markup))
    body = _parse_or_empty(content)
    text = to_canonical_text(content)

    metadata = extract_metadata(page)
    structured_data = extract_structured_data(page)
    keywords = metadata.keywords + keywords_from_structured_data(structured_data)

    record = AnalysisRecord(
        metadata=metadata,
        structured_data=structured_data,
        embeds=extract_social_media_embeds(page),
        keyword_set=normalize_keywords(keywords),
        word_count=count_words(text),
        content_structure=extract_content_structure(body),
        links=extract_links(body, page_url),
        questions=extract_questions(text),
        images=extract_images(body),
        videos=extract_videos(body),
    )
    return record, text


def analyze_article(article: Article) -> Article:
    """Return a new, analyzed copy of an extracted article.

    Articles that were never extracted (pending or failed) are returned
    unchanged. Extracted articles without content or markup are marked
    ``analysis_skipped``.
    """
    if article.state != ArticleState.EXTRACTED:
        return article

    if not article.content or not article.markup:
        logger.info("No content found for %s", article.title)
        return replace(article, state=ArticleState.ANALYSIS_SKIPPED)

    logger.info(" Analyzing %s", article.title)
    analysis, text = build_analysis(article.markup, article.content, article.source_url)

    return replace(
        article,
        state=ArticleState.ANALYZED,
        content=text,
        markup=None,
        analysis=analysis,
    )


def analyze_trends(trends: list[Trend], max_trends: Optional[int] = None) -> list[Trend]:
    """Analyze every article of the leading trends and merge keywords into related terms."""
    for trend in trends[:max_trends]:
        logger.info("Analyzing content and SEO signals for: %s", trend.title)
        trend.articles = [analyze_article(article) for article in trend.articles]

        article_keywords = [
            keyword
            for article in trend.articles
            if article.analysis is not None
            for keyword in article.analysis.keyword_set
        ]
        trend.related_terms = normalize_keywords(trend.related_terms + article_keywords)

    return trends
