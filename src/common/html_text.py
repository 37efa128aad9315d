"""Markup cleanup and HTML to plain text conversion."""

from __future__ import annotations

import re
from typing import Optional

from lxml import html as lxml_html
from lxml.etree import ParserError

_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_ANCHOR_RE = re.compile(r"<a\b[^>]*>(.*?)</a\s*>", re.IGNORECASE | re.DOTALL)
_BLOCK_BREAK_RE = re.compile(
    r"<br\s*/?>|</(?:p|div|h[1-6]|li|tr|blockquote|section|article|header|footer|pre|table|ul|ol)\s*>",
    re.IGNORECASE,
)

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")

_STYLESHEET_XPATH = (
    "//style"
    " | //link[contains(translate(@rel, 'STYLESHEET', 'stylesheet'), 'stylesheet')]"
)


def parse_html(markup: Optional[str]):
    """Parse markup into an lxml element, or None if there is nothing to parse.

    A leading XML declaration is dropped, lxml refuses str input that carries one.
    """
    if not markup or not markup.strip():
        return None
    markup = _XML_DECLARATION_RE.sub("", markup, count=1)
    if not markup.strip():
        return None
    try:
        return lxml_html.fromstring(markup)
    except (ParserError, ValueError):
        return None


def strip_presentation(markup: Optional[str], drop_classes: bool = False) -> str:
    """Remove inline styles, <style> blocks and linked stylesheets from markup."""
    root = parse_html(markup)
    if root is None:
        return ""

    for element in root.xpath(_STYLESHEET_XPATH):
        if element.getparent() is not None:
            element.drop_tree()

    attributes = ("style", "class") if drop_classes else ("style",)
    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        for attribute in attributes:
            element.attrib.pop(attribute, None)

    return lxml_html.tostring(root, encoding="unicode")


def strip_links(text: Optional[str]) -> str:
    """Reduce markdown links and <a> tags to their visible text."""
    if not text:
        return ""
    text = _MARKDOWN_LINK_RE.sub(r"\1", text)
    return _ANCHOR_RE.sub(r"\1", text)


def html_to_text(markup: Optional[str]) -> str:
    """Convert HTML (or plain text) to text, one non-empty line per block."""
    if not markup or not markup.strip():
        return ""

    root = parse_html(_BLOCK_BREAK_RE.sub(lambda m: m.group(0) + "\n", markup))
    if root is None:
        return ""

    body = root.find("body")
    if body is not None:
        root = body

    for element in root.xpath(".//script | .//style | .//noscript"):
        if element.getparent() is not None:
            element.drop_tree()

    lines = [line.strip() for line in root.text_content().splitlines()]
    return "\n".join(line for line in lines if line)
