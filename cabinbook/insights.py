"""
Booking insights: plain statistics computed locally, and a narrative
summary requested from a text-generation service.

The requester never raises. A missing credential yields a fixed
instructional message without any network call; any service error is
logged and replaced by a fixed apology.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal

from cabinbook.domain.models import Cabin, Reservation, reservation_to_dict
from cabinbook.domain.summarizer import Summarizer
from cabinbook.prompts import load_prompt

log = logging.getLogger(__name__)

DEFAULT_PROPERTY_NAME = "Rancho Laguna Ita"
NOT_CONFIGURED_MESSAGE = "Configure your API key to see smart insights."
SERVICE_ERROR_MESSAGE = "Error connecting to the AI for the analysis."


# -- statistics --------------------------------------------------------------


def _booked_days(reservation: Reservation) -> int:
    try:
        start = date.fromisoformat(reservation.start_date)
        end = date.fromisoformat(reservation.end_date)
    except ValueError:
        return 0
    return max(0, (end - start).days + 1)


@dataclass
class BookingStats:
    reservation_count: int = 0
    total_deposits: float = 0
    days_by_cabin: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_reservations(cls, reservations: list[Reservation]) -> "BookingStats":
        days: dict[int, int] = {}
        for r in reservations:
            days[r.cabin_id] = days.get(r.cabin_id, 0) + _booked_days(r)
        return cls(
            reservation_count=len(reservations),
            total_deposits=sum(r.deposit for r in reservations),
            days_by_cabin=days,
        )

    def busiest_cabins(self, limit: int = 3) -> list[int]:
        """Cabin ids with the most booked days, busiest first."""
        ranked = sorted(self.days_by_cabin.items(), key=lambda kv: (-kv[1], kv[0]))
        return [cabin_id for cabin_id, booked in ranked[:limit] if booked > 0]


# -- narrative summary -------------------------------------------------------


@dataclass
class InsightResult:
    status: Literal["succeeded", "failed", "unconfigured"]
    text: str


def paragraphs(text: str) -> list[str]:
    """Split a narrative on line breaks for display, dropping blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class InsightRequester:

    def __init__(
        self,
        summarizer: Summarizer | None,
        property_name: str = DEFAULT_PROPERTY_NAME,
    ):
        self._summarizer = summarizer
        self._property_name = property_name

    def build_prompt(self, cabins: list[Cabin], reservations: list[Reservation]) -> str:
        return load_prompt("insights").format(
            property_name=self._property_name,
            cabin_names=json.dumps([c.name for c in cabins], ensure_ascii=False),
            reservations=json.dumps(
                [reservation_to_dict(r) for r in reservations], ensure_ascii=False
            ),
        )

    async def analyze(
        self, cabins: list[Cabin], reservations: list[Reservation]
    ) -> InsightResult:
        if self._summarizer is None or not self._summarizer.configured:
            log.info("Insights requested without an API key, returning setup hint")
            return InsightResult(status="unconfigured", text=NOT_CONFIGURED_MESSAGE)

        prompt = self.build_prompt(cabins, reservations)
        log.debug("Requesting insights for %d reservation(s)", len(reservations))
        try:
            text = await self._summarizer.summarize(prompt)
        except Exception as exc:
            log.error("Insight request failed: %s", exc)
            return InsightResult(status="failed", text=SERVICE_ERROR_MESSAGE)

        log.info("Insights received (%d chars)", len(text))
        return InsightResult(status="succeeded", text=text)

    async def request(self, cabins: list[Cabin], reservations: list[Reservation]) -> str:
        """The narrative text, or a fixed fallback message. Never raises."""
        return (await self.analyze(cabins, reservations)).text


# -- request state -----------------------------------------------------------


class InsightState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class InsightBusyError(RuntimeError):
    """A second insight request was issued while one is still in flight."""


class InsightSession:
    """
    UI-side state of the insight panel.

    idle -> requesting -> succeeded | failed, and back to requesting on the
    next explicit refresh. There is no retry and no coalescing: refresh()
    refuses to start while a request is in flight.
    """

    def __init__(self, requester: InsightRequester):
        self._requester = requester
        self.state = InsightState.IDLE
        self.text = ""

    @property
    def busy(self) -> bool:
        return self.state is InsightState.REQUESTING

    async def refresh(self, cabins: list[Cabin], reservations: list[Reservation]) -> str:
        if self.busy:
            raise InsightBusyError("an insight request is already in flight")

        self.state = InsightState.REQUESTING
        try:
            result = await self._requester.analyze(cabins, reservations)
        except BaseException:
            # cancelled from outside; leave the panel usable
            self.state = InsightState.FAILED
            self.text = SERVICE_ERROR_MESSAGE
            raise

        # A missing key is a designed fallback, shown like any other text
        self.state = InsightState.FAILED if result.status == "failed" else InsightState.SUCCEEDED
        self.text = result.text
        return self.text
