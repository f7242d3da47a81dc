"""
In-memory BlobStore for testing — no disk required.
"""

from cabinbook.domain.blob_store import BlobStore, StorageError


class InMemoryBlobStore(BlobStore):

    def __init__(self, slots: dict[str, str] | None = None):
        self._slots: dict[str, str] = dict(slots or {})
        self.fail_writes = False
        self.writes = 0

    def read(self, slot: str) -> str | None:
        return self._slots.get(slot)

    def write(self, slot: str, text: str) -> None:
        if self.fail_writes:
            raise StorageError(f"simulated write failure for slot {slot!r}")
        self._slots[slot] = text
        self.writes += 1
