"""Exception hierarchy shared by the pipeline stages."""


class PipelineError(Exception):
    """Base class for errors raised by the trends pipeline."""


class ParseError(PipelineError):
    """Input could not be parsed (relative ages, structured data)."""


class RenderError(PipelineError):
    """Rendering an article URL failed or timed out."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to render {url}: {reason}")
        self.url = url
        self.reason = reason


class EnrichmentError(PipelineError):
    """Secondary-source lookup for a trend failed."""


class TrendSourceError(PipelineError):
    """The trend source returned an unusable response."""


class TrendSourceExhaustedError(TrendSourceError):
    """The trend source produced no trends at all for the requested window."""
