"""Headless Chromium renderer built on Playwright."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import trafilatura
from playwright.async_api import Browser, BrowserContext, Error as PlaywrightError, async_playwright
from readability import Document

from common.errors import RenderError
from common.html_text import html_to_text, parse_html
from extract_content.models import RenderedPage

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _meta_description(markup: str) -> Optional[str]:
    root = parse_html(markup)
    if root is None:
        return None
    for xpath in (
        "//meta[@name='description']/@content",
        "//meta[@property='og:description']/@content",
    ):
        values = [v.strip() for v in root.xpath(xpath) if v.strip()]
        if values:
            return values[0]
    return None


def page_from_markup(url: str, markup: str) -> RenderedPage:
    """
    Reduce rendered page markup to title, description and main content.

    Order:
    1. readability-lxml (rich HTML content)
    2. trafilatura (plain text) when readability finds no text

    Raises:
        RenderError: If the markup is empty.
    """
    if not markup or not markup.strip():
        raise RenderError(url, "empty document")

    title = ""
    content = None
    try:
        doc = Document(markup)
        title = doc.short_title() or ""
        summary_html = doc.summary(html_partial=True)
        if html_to_text(summary_html):
            content = summary_html
    except Exception as e:
        logger.warning("readability failed for %s: %s", url, e)

    if content is None:
        try:
            content = trafilatura.extract(markup, url=url)
        except Exception as e:
            logger.warning("trafilatura failed for %s: %s", url, e)

    return RenderedPage(
        title=title,
        description=_meta_description(markup),
        content=content,
        markup=markup,
    )


class PlaywrightSession:
    """One browser context, used by exactly one extraction task."""

    def __init__(self, context: BrowserContext, wait_until: str = "networkidle"):
        self._context = context
        self._wait_until = wait_until

    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        page = await self._context.new_page()
        try:
            await page.goto(url, wait_until=self._wait_until, timeout=timeout_ms)
            markup = await page.content()
        except PlaywrightError as e:
            raise RenderError(url, str(e)) from e
        finally:
            await page.close()
        return page_from_markup(url, markup)


class PlaywrightRenderer:
    """Launch Chromium once per pipeline run and hand out isolated sessions.

    Usage:
        >>> async with PlaywrightRenderer() as renderer:
        ...     async with renderer.session() as session:
        ...         page = await session.render(url, timeout_ms=12000)
    """

    def __init__(self, headless: bool = True, wait_until: str = "networkidle"):
        self.headless = headless
        self.wait_until = wait_until
        self._playwright = None
        self._browser: Optional[Browser] = None

    async def start(self) -> "PlaywrightRenderer":
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        logger.info("Started headless Chromium renderer")
        return self

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Stopped headless Chromium renderer")

    async def __aenter__(self) -> "PlaywrightRenderer":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PlaywrightSession]:
        if self._browser is None:
            raise RenderError("", "renderer has not been started")
        context = await self._browser.new_context(user_agent=USER_AGENT)
        try:
            yield PlaywrightSession(context, wait_until=self.wait_until)
        finally:
            await context.close()
