"""
Summarizer port — turns a free-text prompt into a narrative.

AI is used here only as an opaque text generator; the prompt is built
by InsightRequester and the reply is shown to the owner as-is.
"""

from abc import ABC, abstractmethod


class ServiceError(Exception):
    """The text-generation service could not produce a reply."""


class Summarizer(ABC):
    """
    Port: one request/response exchange with a text-generation service.

    Replies are non-deterministic for real services; callers must not
    assume the same prompt yields the same text twice.
    """

    @property
    @abstractmethod
    def configured(self) -> bool:
        """False when no credential is available; no call may be attempted."""
        ...

    @abstractmethod
    async def summarize(self, prompt: str) -> str:
        """Return the generated text. Raises ServiceError on failure."""
        ...
