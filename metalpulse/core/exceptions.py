"""Error taxonomy shared by the pipeline stages.

Branch boundaries (relevance pipeline, cycle orchestrator) catch these and turn
them into recorded outcomes; the HTTP layer maps SettingsValidationError to 400.
"""

from typing import Optional


class BotError(Exception):
    """Base class for every error raised by the bot's own code."""


class ConfigError(BotError):
    """A required credential or setting is missing."""


class UpstreamError(BotError):
    """A third-party call (prices, news, LLM) failed or returned unusable data."""

    def __init__(
        self,
        message: str,
        source: str = "",
        status_code: Optional[int] = None,
    ):
        self.source = source
        self.status_code = status_code
        super().__init__(message)


class SettingsValidationError(BotError):
    """Settings input was explicitly provided but invalid."""


class GenerationError(BotError):
    """The generative model failed or produced unusable output."""


class EmptyGeneration(GenerationError):
    """The generative model returned nothing after trimming."""


class PublishError(BotError):
    """The social platform refused the post, or it failed a precondition."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
