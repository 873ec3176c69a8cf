"""Exception hierarchy for AI Form Assist."""

from typing import Optional


class FormAssistError(Exception):
    """Base class for all form assist errors."""


class ConfigurationParseError(FormAssistError):
    """The page-declared configuration could not be parsed or validated."""


class PreviewFetchError(FormAssistError):
    """The preview document request returned a non-success status."""
    
    def __init__(self, url: str, status: int, message: Optional[str] = None):
        self.url = url
        self.status = status
        super().__init__(message or f"Preview fetch failed with status {status}")


class GenerationError(FormAssistError):
    """The generation service reported an unsuccessful result."""
