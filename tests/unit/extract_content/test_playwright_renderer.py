"""Tests for extract_content.playwright_renderer module."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from common.errors import RenderError
from extract_content.playwright_renderer import PlaywrightRenderer, PlaywrightSession, page_from_markup

MARKUP = (
    "<html><head><title>Eclipse tonight</title>"
    "<meta name='description' content='Where to watch'></head>"
    "<body><article><p>Body text</p></article></body></html>"
)


class TestPageFromMarkup:
    @patch("extract_content.playwright_renderer.trafilatura")
    @patch("extract_content.playwright_renderer.Document")
    def test_uses_readability_content(self, mock_doc, mock_traf) -> None:
        mock_doc.return_value.short_title.return_value = "Eclipse tonight"
        mock_doc.return_value.summary.return_value = "<div><p>Body text</p></div>"

        page = page_from_markup("https://example.com/a", MARKUP)

        assert page.title == "Eclipse tonight"
        assert page.description == "Where to watch"
        assert page.content == "<div><p>Body text</p></div>"
        assert page.markup == MARKUP
        mock_traf.extract.assert_not_called()

    @patch("extract_content.playwright_renderer.trafilatura")
    @patch("extract_content.playwright_renderer.Document")
    def test_falls_back_to_trafilatura_when_summary_empty(self, mock_doc, mock_traf) -> None:
        mock_doc.return_value.short_title.return_value = "Eclipse tonight"
        mock_doc.return_value.summary.return_value = "<div></div>"
        mock_traf.extract.return_value = "Body text"

        page = page_from_markup("https://example.com/a", MARKUP)

        assert page.content == "Body text"
        mock_traf.extract.assert_called_once_with(MARKUP, url="https://example.com/a")

    @patch("extract_content.playwright_renderer.trafilatura")
    @patch("extract_content.playwright_renderer.Document")
    def test_falls_back_to_trafilatura_when_readability_raises(self, mock_doc, mock_traf) -> None:
        mock_doc.side_effect = Exception("parse error")
        mock_traf.extract.return_value = "Body text"

        page = page_from_markup("https://example.com/a", MARKUP)

        assert page.title == ""
        assert page.content == "Body text"

    def test_og_description_used_when_meta_missing(self) -> None:
        markup = "<html><head><meta property='og:description' content='OG text'></head><body></body></html>"
        with patch("extract_content.playwright_renderer.trafilatura") as mock_traf:
            mock_traf.extract.return_value = None
            page = page_from_markup("https://example.com/a", markup)
        assert page.description == "OG text"

    def test_empty_markup_raises(self) -> None:
        with pytest.raises(RenderError) as exc_info:
            page_from_markup("https://example.com/a", "   ")
        assert exc_info.value.url == "https://example.com/a"


class TestPlaywrightSession:
    def _context(self, page):
        context = Mock()
        context.new_page = AsyncMock(return_value=page)
        return context

    @patch("extract_content.playwright_renderer.page_from_markup")
    def test_render_navigates_and_closes_page(self, mock_from_markup) -> None:
        page = Mock()
        page.goto = AsyncMock()
        page.content = AsyncMock(return_value=MARKUP)
        page.close = AsyncMock()
        mock_from_markup.return_value = "rendered"

        result = asyncio.run(PlaywrightSession(self._context(page)).render("https://example.com/a", 5000))

        assert result == "rendered"
        page.goto.assert_awaited_once_with("https://example.com/a", wait_until="networkidle", timeout=5000)
        page.close.assert_awaited_once()
        mock_from_markup.assert_called_once_with("https://example.com/a", MARKUP)

    def test_navigation_error_becomes_render_error(self) -> None:
        page = Mock()
        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        page.close = AsyncMock()

        with pytest.raises(RenderError) as exc_info:
            asyncio.run(PlaywrightSession(self._context(page)).render("https://example.com/a", 5000))

        assert "ERR_NAME_NOT_RESOLVED" in exc_info.value.reason
        page.close.assert_awaited_once()


class TestPlaywrightRenderer:
    def test_session_requires_started_renderer(self) -> None:
        async def open_session():
            async with PlaywrightRenderer().session():
                pass

        with pytest.raises(RenderError):
            asyncio.run(open_session())

    def test_session_closes_context(self) -> None:
        context = Mock()
        context.close = AsyncMock()
        browser = Mock()
        browser.new_context = AsyncMock(return_value=context)
        renderer = PlaywrightRenderer()
        renderer._browser = browser

        async def open_session():
            async with renderer.session() as session:
                assert isinstance(session, PlaywrightSession)

        asyncio.run(open_session())

        context.close.assert_awaited_once()
