"""
Cabin and Reservation records, plus their blob-store wire format.

Both collections are stored as one JSON array each, with the field names
the first version of the app wrote (camelCase). Decoding never raises:
any shape mismatch comes back as a Decoded with value=None and a warning,
so the caller can fall back to defaults.
"""

import json
import math
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any

DEFAULT_CABIN_COUNT = 8


@dataclass
class Cabin:
    """A rentable unit."""
    id: int
    name: str
    image: str | None = None   # data URI, display only


@dataclass
class Reservation:
    """A booking of one cabin over an inclusive date range."""
    id: str
    cabin_id: int
    client_name: str
    deposit: float
    start_date: str            # ISO: "2024-03-10"
    end_date: str              # ISO: "2024-03-12", inclusive
    notes: str | None = None


@dataclass
class Decoded:
    """Result of decoding one stored collection."""
    value: list | None
    warning: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def seed_cabins(count: int = DEFAULT_CABIN_COUNT) -> list[Cabin]:
    return [Cabin(id=i, name=f"Cabin {i}") for i in range(1, count + 1)]


def new_reservation_id() -> str:
    return str(uuid.uuid4())


# -- encoding ----------------------------------------------------------------


def cabin_to_dict(cabin: Cabin) -> dict[str, Any]:
    return {"id": cabin.id, "name": cabin.name, "image": cabin.image}


def reservation_to_dict(reservation: Reservation) -> dict[str, Any]:
    data = {
        "id": reservation.id,
        "cabinId": reservation.cabin_id,
        "clientName": reservation.client_name,
        "deposit": reservation.deposit,
        "startDate": reservation.start_date,
        "endDate": reservation.end_date,
    }
    if reservation.notes is not None:
        data["notes"] = reservation.notes
    return data


def cabins_to_json(cabins: list[Cabin]) -> str:
    return json.dumps([cabin_to_dict(c) for c in cabins], ensure_ascii=False)


def reservations_to_json(reservations: list[Reservation]) -> str:
    return json.dumps([reservation_to_dict(r) for r in reservations], ensure_ascii=False)


# -- decoding ----------------------------------------------------------------


class _ShapeError(ValueError):
    pass


def _field(item: dict, key: str, kinds: tuple, optional: bool = False):
    if key not in item:
        if optional:
            return None
        raise _ShapeError(f"missing field {key!r}")
    value = item[key]
    if value is None and optional:
        return None
    # bool is an int subclass; a stored true/false is never a valid number
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise _ShapeError(f"field {key!r} has unexpected type {type(value).__name__}")
    return value


def _iso_date(item: dict, key: str) -> str:
    value = _field(item, key, (str,))
    try:
        canonical = date.fromisoformat(value).isoformat()
    except ValueError:
        canonical = None
    # stored dates are compared as strings, so only YYYY-MM-DD is accepted
    if canonical != value:
        raise _ShapeError(f"field {key!r} is not an ISO date: {value!r}")
    return value


def _deposit(item: dict) -> float:
    value = _field(item, "deposit", (int, float))
    if not math.isfinite(value) or value < 0:
        raise _ShapeError(f"field 'deposit' is not a non-negative amount: {value!r}")
    return value


def _load_list(text: str) -> list:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _ShapeError(f"invalid JSON: {exc}") from None
    if not isinstance(data, list):
        raise _ShapeError(f"expected a list, got {type(data).__name__}")
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise _ShapeError(f"entry {i} is not an object")
    return data


def _parse_cabins(text: str) -> list[Cabin]:
    cabins = []
    seen: set[int] = set()
    for item in _load_list(text):
        cabin_id = _field(item, "id", (int,))
        if cabin_id <= 0 or cabin_id in seen:
            raise _ShapeError(f"invalid or duplicate cabin id {cabin_id}")
        seen.add(cabin_id)
        cabins.append(Cabin(
            id=cabin_id,
            name=_field(item, "name", (str,)),
            image=_field(item, "image", (str,), optional=True),
        ))
    return cabins


def _parse_reservations(text: str) -> list[Reservation]:
    reservations = []
    seen: set[str] = set()
    for item in _load_list(text):
        reservation_id = _field(item, "id", (str,))
        if reservation_id in seen:
            raise _ShapeError(f"duplicate reservation id {reservation_id!r}")
        seen.add(reservation_id)
        reservations.append(Reservation(
            id=reservation_id,
            cabin_id=_field(item, "cabinId", (int,)),
            client_name=_field(item, "clientName", (str,)),
            deposit=_deposit(item),
            start_date=_iso_date(item, "startDate"),
            end_date=_iso_date(item, "endDate"),
            notes=_field(item, "notes", (str,), optional=True),
        ))
    return reservations


def decode_cabins(text: str) -> Decoded:
    try:
        return Decoded(_parse_cabins(text))
    except _ShapeError as exc:
        return Decoded(None, f"stored cabins are malformed ({exc})")


def decode_reservations(text: str) -> Decoded:
    try:
        return Decoded(_parse_reservations(text))
    except _ShapeError as exc:
        return Decoded(None, f"stored reservations are malformed ({exc})")
