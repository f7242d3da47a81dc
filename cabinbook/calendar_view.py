"""
Calendar queries: which reservations are active on a given day, and the
month grid built from them.

A reservation covers every day of its closed interval [start, end].
A reversed interval (end before start) covers no day at all.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date

from cabinbook.domain.models import Reservation

log = logging.getLogger(__name__)

WEEKDAY_HEADERS = ("S", "M", "T", "W", "T", "F", "S")  # Sunday first
MAX_MARKERS = 4


def _interval(reservation: Reservation) -> tuple[date, date] | None:
    try:
        return date.fromisoformat(reservation.start_date), date.fromisoformat(reservation.end_date)
    except ValueError:
        log.warning(
            "res=%s has unreadable dates %r..%r, skipped in calendar",
            reservation.id, reservation.start_date, reservation.end_date,
        )
        return None


def is_active_on(reservation: Reservation, day: date) -> bool:
    interval = _interval(reservation)
    if interval is None:
        return False
    start, end = interval
    return start <= day <= end


def reservations_on(day: date, reservations: list[Reservation]) -> list[Reservation]:
    """Every reservation whose [start, end] contains day, in input order."""
    return [r for r in reservations if is_active_on(r, day)]


# -- month view --------------------------------------------------------------


@dataclass
class CalendarDay:
    day: date
    reservations: list[Reservation] = field(default_factory=list)

    @property
    def markers(self) -> list[Reservation]:
        return self.reservations[:MAX_MARKERS]

    @property
    def overflow(self) -> int:
        """How many reservations are hidden behind the "+N" marker."""
        return max(0, len(self.reservations) - MAX_MARKERS)


@dataclass
class MonthView:
    year: int
    month: int
    leading_blanks: int
    days: list[CalendarDay]

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[list[CalendarDay | None]]:
        """Rows of seven cells, Sunday first; None for padding cells."""
        cells: list[CalendarDay | None] = [None] * self.leading_blanks + list(self.days)
        cells += [None] * (-len(cells) % 7)
        return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move delta months forward (or back when negative)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def leading_blanks(year: int, month: int) -> int:
    """Number of empty cells before day 1 in a Sunday-first grid."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return (date(year, month, 1).weekday() + 1) % 7


def build_month(year: int, month: int, reservations: list[Reservation]) -> MonthView:
    days_in_month = calendar.monthrange(year, month)[1]
    days = []
    for n in range(1, days_in_month + 1):
        day = date(year, month, n)
        days.append(CalendarDay(day=day, reservations=reservations_on(day, reservations)))
    return MonthView(
        year=year,
        month=month,
        leading_blanks=leading_blanks(year, month),
        days=days,
    )
