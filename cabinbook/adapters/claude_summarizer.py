"""
ClaudeSummarizer — uses the Claude API to write booking insights.

The prompt arrives fully built; this adapter only adds the system role
and maps transport failures to ServiceError.
"""

import os

import anthropic

from cabinbook.domain.summarizer import ServiceError, Summarizer

_SYSTEM_PROMPT = """
You are the administrative assistant of a small cabin rental property.
You write short, friendly and professional reports for the owner.
Answer in plain text paragraphs separated by line breaks, without markdown.
""".strip()


class ClaudeSummarizer(Summarizer):
    """Summarizer backed by Claude claude-haiku-4-5-20251001 (fast + cheap)."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 1024,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        api_key = api_key if api_key is not None else os.environ.get("ANTHROPIC_API_KEY")
        if client is None and api_key:
            client = anthropic.AsyncAnthropic(api_key=api_key)
        # Without a key or client nothing can ever be sent
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def summarize(self, prompt: str) -> str:
        if self._client is None:
            raise ServiceError("ANTHROPIC_API_KEY not configured")

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise ServiceError(f"Claude request failed: {exc}") from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not text:
            raise ServiceError("Claude returned an empty reply")
        return text
