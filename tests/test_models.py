"""
Blob-store wire format for cabins and reservations.

Valid collections round-trip exactly; anything malformed decodes to a
warning instead of raising.
"""

import json

import pytest

from cabinbook.domain.models import (
    Cabin,
    Reservation,
    cabins_to_json,
    decode_cabins,
    decode_reservations,
    new_reservation_id,
    reservations_to_json,
    seed_cabins,
)


def _res(**overrides) -> Reservation:
    fields = dict(
        id="r1",
        cabin_id=1,
        client_name="A. Gomez",
        deposit=5000,
        start_date="2024-03-10",
        end_date="2024-03-12",
    )
    fields.update(overrides)
    return Reservation(**fields)


def test_seed_has_eight_named_cabins():
    cabins = seed_cabins()
    assert [c.id for c in cabins] == list(range(1, 9))
    assert [c.name for c in cabins] == [f"Cabin {i}" for i in range(1, 9)]
    assert all(c.image is None for c in cabins)


def test_reservation_ids_are_unique():
    assert len({new_reservation_id() for _ in range(100)}) == 100


def test_reservation_uses_original_field_names():
    data = json.loads(reservations_to_json([_res(notes="late arrival")]))
    assert data == [{
        "id": "r1",
        "cabinId": 1,
        "clientName": "A. Gomez",
        "deposit": 5000,
        "startDate": "2024-03-10",
        "endDate": "2024-03-12",
        "notes": "late arrival",
    }]


def test_absent_notes_are_omitted():
    data = json.loads(reservations_to_json([_res()]))
    assert "notes" not in data[0]


def test_cabins_round_trip():
    cabins = [Cabin(1, "Lakeside"), Cabin(2, "Pine", image="data:image/png;base64,AAAA")]
    decoded = decode_cabins(cabins_to_json(cabins))
    assert decoded.ok
    assert decoded.value == cabins


def test_reservations_round_trip_with_float_deposit_and_notes():
    reservations = [_res(), _res(id="r2", cabin_id=3, deposit=1250.5, notes="Cabaña ñ")]
    decoded = decode_reservations(reservations_to_json(reservations))
    assert decoded.value == reservations


def test_empty_collections_round_trip():
    assert decode_cabins(cabins_to_json([])).value == []
    assert decode_reservations(reservations_to_json([])).value == []


def test_reversed_dates_are_still_valid_data():
    reservations = [_res(start_date="2024-03-12", end_date="2024-03-10")]
    assert decode_reservations(reservations_to_json(reservations)).value == reservations


@pytest.mark.parametrize("text", [
    "not json",
    '{"id": 1}',
    "[1, 2]",
    '[{"id": 1}]',
    '[{"id": "1", "name": "Cabin 1", "image": null}]',
    '[{"id": true, "name": "Cabin 1", "image": null}]',
    '[{"id": 1, "name": 7, "image": null}]',
    '[{"id": 0, "name": "Cabin 0", "image": null}]',
    '[{"id": 1, "name": "A", "image": null}, {"id": 1, "name": "B", "image": null}]',
])
def test_malformed_cabins_give_warning(text):
    decoded = decode_cabins(text)
    assert not decoded.ok
    assert decoded.value is None
    assert "cabins" in decoded.warning


@pytest.mark.parametrize("patch", [
    {"deposit": "5000"},
    {"deposit": True},
    {"cabinId": "1"},
    {"startDate": "10/03/2024"},
    {"endDate": None},
    {"notes": 42},
])
def test_malformed_reservations_give_warning(patch):
    item = json.loads(reservations_to_json([_res()]))[0]
    item.update(patch)
    decoded = decode_reservations(json.dumps([item]))
    assert decoded.value is None
    assert "reservations" in decoded.warning


def test_missing_reservation_field_gives_warning():
    item = json.loads(reservations_to_json([_res()]))[0]
    del item["clientName"]
    decoded = decode_reservations(json.dumps([item]))
    assert not decoded.ok
    assert "clientName" in decoded.warning


@pytest.mark.parametrize("stored", ["20240310", "2024-W10-7", "2024-3-10", "2024-03-10 "])
def test_non_canonical_dates_give_warning(stored):
    item = json.loads(reservations_to_json([_res()]))[0]
    item["startDate"] = stored
    decoded = decode_reservations(json.dumps([item]))
    assert not decoded.ok
    assert "startDate" in decoded.warning


@pytest.mark.parametrize("deposit", [float("nan"), float("inf"), float("-inf"), -1])
def test_unusable_deposits_give_warning(deposit):
    item = json.loads(reservations_to_json([_res()]))[0]
    item["deposit"] = deposit
    # json.dumps writes NaN / Infinity, which json.loads accepts back
    decoded = decode_reservations(json.dumps([item]))
    assert not decoded.ok
    assert "deposit" in decoded.warning


def test_zero_deposit_is_valid():
    reservations = [_res(deposit=0)]
    assert decode_reservations(reservations_to_json(reservations)).value == reservations
