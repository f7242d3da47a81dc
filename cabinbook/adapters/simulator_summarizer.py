"""
SimulatorSummarizer — deterministic stand-in for the text-generation service.

No LLM calls, no network. Counts calls and can be switched into a
failing or unconfigured mode so callers' fallbacks can be tested.
"""

import re

from cabinbook.domain.summarizer import ServiceError, Summarizer

_RESERVATION_COUNT = re.compile(r'"clientName"')


class SimulatorSummarizer(Summarizer):

    def __init__(self, configured: bool = True, fail: bool = False):
        self._configured = configured
        self.fail = fail
        self.calls = 0
        self.prompts: list[str] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def summarize(self, prompt: str) -> str:
        self.calls += 1
        self.prompts.append(prompt)
        if self.fail:
            raise ServiceError("simulated service outage")

        count = len(_RESERVATION_COUNT.findall(prompt))
        return (
            f"Overall occupancy: {count} reservation(s) on record.\n"
            "Highest demand: see the per-cabin breakdown.\n"
            "Suggestion: offer a mid-week discount to fill quiet days."
        )
