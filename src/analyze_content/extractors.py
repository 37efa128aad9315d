"""Field extractors run against parsed article markup and content."""

from __future__ import annotations

import functools
import json
import logging
import re
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import urljoin, urlparse

from lxml import html as lxml_html

from common.errors import ParseError
from common.models import EmbedDescriptor, PageMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DESCRIPTION = "No description provided"

# Boilerplate and provenance fields that carry nothing worth summarizing.
STRUCTURED_DATA_DENY_LIST = frozenset({
    "@context",
    "@id",
    "url",
    "mainEntityOfPage",
    "publisher",
    "logo",
    "image",
    "thumbnailUrl",
    "potentialAction",
    "sameAs",
    "isAccessibleForFree",
    "hasPart",
})

EMBED_PLATFORMS = {
    "twitter": {
        "classes": ["twitter-tweet", "twitter-timeline"],
        "src": ["twitter.com", "//x.com/"],
    },
    "youtube": {
        "classes": [],
        "src": ["youtube.com", "youtu.be"],
    },
    "tiktok": {
        "classes": ["tiktok-embed"],
        "src": ["tiktok.com"],
    },
    "instagram": {
        "classes": ["instagram-media"],
        "src": ["instagram.com"],
    },
}

_QUESTION_RE = re.compile(r"[^.!?]*\?")


def safe_extractor(default: Callable[[], T]):
    """Return ``default()`` and log instead of raising when the extractor fails."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning("%s failed: %s", func.__name__, e)
                return default()

        return wrapper

    return decorator


def _class_xpath(class_name: str) -> str:
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {class_name} ')"


def _text(element) -> str:
    return " ".join(element.text_content().split())


def _outer_html(element) -> str:
    return lxml_html.tostring(element, encoding="unicode", with_tail=False)


@safe_extractor(lambda: PageMetadata(title="", description=DEFAULT_DESCRIPTION))
def extract_metadata(document) -> PageMetadata:
    """Extract title, description and keywords from <title> and <meta> tags."""
    titles = document.xpath("//title")
    title = _text(titles[0]) if titles else ""

    descriptions = document.xpath("//meta[@name='description']/@content")
    description = descriptions[0].strip() if descriptions and descriptions[0].strip() else DEFAULT_DESCRIPTION

    keyword_values = document.xpath("//meta[@name='keywords']/@content")
    keywords = []
    if keyword_values:
        keywords = [k.strip() for k in keyword_values[0].split(",") if k.strip()]

    return PageMetadata(title=title, description=description, keywords=keywords)


def parse_json_ld(raw: str) -> Any:
    """Parse a JSON-LD payload.

    Raises:
        ParseError: If the payload is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Malformed JSON-LD: {e}") from e


def sanitize_structured_data(data: Any) -> Optional[Any]:
    """Strip deny-listed fields from each top-level object and drop emptied objects."""

    def strip(obj: Any) -> Any:
        if not isinstance(obj, dict):
            return obj
        return {k: v for k, v in obj.items() if k not in STRUCTURED_DATA_DENY_LIST}

    if isinstance(data, list):
        cleaned = [strip(item) for item in data]
        cleaned = [item for item in cleaned if not (isinstance(item, dict) and not item)]
        return cleaned or None

    cleaned = strip(data)
    if isinstance(cleaned, dict) and not cleaned:
        return None
    return cleaned


@safe_extractor(lambda: None)
def extract_structured_data(document) -> Optional[Any]:
    """Extract the first JSON-LD block. Malformed JSON yields None."""
    scripts = document.xpath("//script[@type='application/ld+json']")
    if not scripts:
        return None

    try:
        data = parse_json_ld(scripts[0].text or "")
    except ParseError as e:
        logger.warning("Error parsing JSON-LD: %s", e)
        return None

    return sanitize_structured_data(data)


@safe_extractor(lambda: {platform: [] for platform in EMBED_PLATFORMS})
def extract_social_media_embeds(document) -> dict[str, list[EmbedDescriptor]]:
    """Find social media embeds by element class or iframe source, in document order."""
    embeds: dict[str, list[EmbedDescriptor]] = {}
    for platform, patterns in EMBED_PLATFORMS.items():
        conditions = [f"//*[{_class_xpath(c)}]" for c in patterns["classes"]]
        conditions += [f"//iframe[contains(@src, '{s}')]" for s in patterns["src"]]
        elements = document.xpath(" | ".join(conditions))

        embeds[platform] = [
            EmbedDescriptor(
                src=element.get("src") or element.get("cite") or element.get("data-instgrm-permalink") or "",
                html=_outer_html(element),
            )
            for element in elements
        ]
    return embeds


@safe_extractor(dict)
def extract_content_structure(document) -> dict[str, Any]:
    """Headings by level, paragraph text and the markup of each list and table."""
    headings = {f"H{level}": [_text(h) for h in document.xpath(f"//h{level}")] for level in range(1, 7)}
    return {
        "headings": headings,
        "paragraphs": [_text(p) for p in document.xpath("//p") if _text(p)],
        "lists": [_outer_html(e) for e in document.xpath("//ul | //ol")],
        "tables": [_outer_html(e) for e in document.xpath("//table")],
        "total_headings": sum(len(h) for h in headings.values()),
    }


@safe_extractor(lambda: {"internal": [], "external": []})
def extract_links(document, page_url: Optional[str]) -> dict[str, list[str]]:
    """Split links into internal and external relative to the article's host."""
    hostname = urlparse(page_url).hostname if page_url else None
    result: dict[str, list[str]] = {"internal": [], "external": []}

    for href in document.xpath("//a/@href"):
        href = href.strip()
        if href.endswith("#"):
            href = href[:-1]
        if not href or href.startswith(("mailto:", "javascript:", "tel:")):
            continue
        absolute = urljoin(page_url, href) if page_url else href
        link_host = urlparse(absolute).hostname
        if link_host is None or link_host == hostname:
            result["internal"].append(href)
        else:
            result["external"].append(href)
    return result


@safe_extractor(list)
def extract_questions(text: str) -> list[str]:
    """Sentences of the plain text that end with a question mark."""
    return [q.strip() for q in _QUESTION_RE.findall(text) if q.strip() != "?"]


@safe_extractor(list)
def extract_images(document) -> list[dict[str, str]]:
    return [
        {"src": img.get("src", ""), "alt": img.get("alt", "")}
        for img in document.xpath("//img")
    ]


@safe_extractor(list)
def extract_videos(document) -> list[dict[str, str]]:
    return [
        {"src": video.get("src", ""), "poster": video.get("poster", "")}
        for video in document.xpath("//video")
    ]
