"""
EntityStore — the authoritative in-memory copy of cabins and reservations.

Every mutation is followed by persist(), which writes both collections
to the BlobStore. Nothing here validates bookings: overlapping
reservations on one cabin and reversed date ranges are accepted.

Nothing else should hold on to Cabin or Reservation objects across user
actions; re-read them by id from the store.
"""

import dataclasses
import logging
from dataclasses import dataclass, field

from cabinbook.domain.blob_store import (
    CABINS_SLOT,
    RESERVATIONS_SLOT,
    BlobStore,
    StorageError,
)
from cabinbook.domain.models import (
    DEFAULT_CABIN_COUNT,
    Cabin,
    Reservation,
    cabins_to_json,
    decode_cabins,
    decode_reservations,
    reservations_to_json,
    seed_cabins,
)

log = logging.getLogger(__name__)

UNKNOWN_CABIN = "Unknown cabin"

_UNSET = object()


@dataclass
class LoadReport:
    """What load() found. Warnings are non-fatal and meant for the owner."""
    cabins_seeded: bool = False
    warnings: list[str] = field(default_factory=list)


class EntityStore:

    def __init__(self, blob_store: BlobStore, cabin_count: int = DEFAULT_CABIN_COUNT):
        self._blobs = blob_store
        self._cabin_count = cabin_count
        self._cabins: list[Cabin] = seed_cabins(cabin_count)
        self._reservations: list[Reservation] = []
        self.storage_warning: str | None = None

    # -- loading -------------------------------------------------------------

    def load(self) -> LoadReport:
        """
        Rehydrate both collections. Never raises.

        An absent slot means first run: seed cabins, no reservations.
        An unreadable or malformed slot falls back to the same defaults
        and adds a warning to the report.
        """
        report = LoadReport()

        cabins = self._load_slot(CABINS_SLOT, decode_cabins, report)
        if cabins is None:
            cabins = seed_cabins(self._cabin_count)
            report.cabins_seeded = True
        self._cabins = cabins

        reservations = self._load_slot(RESERVATIONS_SLOT, decode_reservations, report)
        self._reservations = reservations if reservations is not None else []

        log.info(
            "Loaded %d cabin(s)%s and %d reservation(s)",
            len(self._cabins),
            " (seeded)" if report.cabins_seeded else "",
            len(self._reservations),
        )
        return report

    def _load_slot(self, slot: str, decode, report: LoadReport) -> list | None:
        try:
            text = self._blobs.read(slot)
        except StorageError as exc:
            msg = f"could not read {slot}: {exc}; using defaults"
            log.warning("%s", msg)
            report.warnings.append(msg)
            return None
        if text is None:
            return None

        decoded = decode(text)
        if not decoded.ok:
            msg = f"{decoded.warning}; using defaults"
            log.warning("%s", msg)
            report.warnings.append(msg)
            return None
        return decoded.value

    # -- reads ---------------------------------------------------------------

    @property
    def cabins(self) -> list[Cabin]:
        return list(self._cabins)

    @property
    def reservations(self) -> list[Reservation]:
        return list(self._reservations)

    def get_cabin(self, cabin_id: int) -> Cabin | None:
        return next((c for c in self._cabins if c.id == cabin_id), None)

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        return next((r for r in self._reservations if r.id == reservation_id), None)

    def reservations_for_cabin(self, cabin_id: int) -> list[Reservation]:
        return [r for r in self._reservations if r.cabin_id == cabin_id]

    def upcoming(self) -> list[Reservation]:
        """All reservations ordered by start date (stable for equal dates)."""
        return sorted(self._reservations, key=lambda r: r.start_date)

    def cabin_label(self, cabin_id: int) -> str:
        cabin = self.get_cabin(cabin_id)
        return cabin.name if cabin else UNKNOWN_CABIN

    # -- mutations -----------------------------------------------------------

    def upsert_reservation(self, record: Reservation) -> None:
        """Replace the reservation with the same id in place, or append it."""
        for i, existing in enumerate(self._reservations):
            if existing.id == record.id:
                self._reservations[i] = record
                log.info("res=%s updated (cabin=%s)", record.id, record.cabin_id)
                break
        else:
            self._reservations.append(record)
            log.info("res=%s created (cabin=%s)", record.id, record.cabin_id)
        self.persist()

    def delete_reservation(self, reservation_id: str) -> None:
        """Remove the reservation if present. Unknown ids are ignored."""
        remaining = [r for r in self._reservations if r.id != reservation_id]
        if len(remaining) == len(self._reservations):
            log.debug("res=%s delete skipped: not found", reservation_id)
            return
        self._reservations = remaining
        log.info("res=%s deleted", reservation_id)
        self.persist()

    def update_cabin(self, cabin_id: int, *, name=_UNSET, image=_UNSET) -> None:
        """Merge name and/or image into a cabin. Unknown ids are ignored."""
        patch = {}
        if name is not _UNSET:
            patch["name"] = name
        if image is not _UNSET:
            patch["image"] = image

        for i, cabin in enumerate(self._cabins):
            if cabin.id == cabin_id:
                self._cabins[i] = dataclasses.replace(cabin, **patch)
                log.info("cabin=%d updated: %s", cabin_id, ", ".join(sorted(patch)) or "nothing")
                break
        else:
            log.debug("cabin=%d update skipped: not found", cabin_id)
            return
        self.persist()

    # -- persistence ---------------------------------------------------------

    def persist(self) -> bool:
        """
        Write both collections to the blob store.

        A failed write keeps the in-memory state, is logged, and is kept in
        storage_warning so the UI can tell the owner. Returns True on success.
        """
        try:
            self._blobs.write(CABINS_SLOT, cabins_to_json(self._cabins))
            self._blobs.write(RESERVATIONS_SLOT, reservations_to_json(self._reservations))
        except StorageError as exc:
            self.storage_warning = f"Changes could not be saved: {exc}"
            log.warning("Persist failed: %s", exc)
            return False
        self.storage_warning = None
        return True
