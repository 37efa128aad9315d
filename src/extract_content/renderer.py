"""Contracts for the headless renderer and the secondary source."""

from __future__ import annotations

from typing import AsyncContextManager, Protocol

from common.models import SecondarySourcePage
from extract_content.models import RenderedPage


class RenderSession(Protocol):
    """A rendering context owned by a single extraction task."""

    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        """Render ``url`` and return its content.

        Raises:
            RenderError: On navigation failure or timeout.
        """
        ...


class Renderer(Protocol):
    def session(self) -> AsyncContextManager[RenderSession]:
        """Open a fresh session; leaving the context releases it."""
        ...


class SecondarySource(Protocol):
    async def lookup(self, topic: str) -> list[SecondarySourcePage]:
        """Return background pages for a topic, or an empty list on no match."""
        ...
