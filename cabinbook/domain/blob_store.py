"""
BlobStore port — durable key/value storage for whole serialized collections.
"""

from abc import ABC, abstractmethod

CABINS_SLOT = "rli_cabins"
RESERVATIONS_SLOT = "rli_reservations"


class StorageError(Exception):
    """Raised by adapters when the underlying storage cannot be read or written."""


class BlobStore(ABC):
    """
    Port: named text slots that survive restarts.

    An absent slot is a valid first-run state, not an error.
    Implementations may be SQLite (SqliteBlobStore), plain files
    (FileBlobStore) or a dict (InMemoryBlobStore). All must satisfy
    the same contract.
    """

    @abstractmethod
    def read(self, slot: str) -> str | None:
        """Return the stored text, or None if the slot was never written."""
        ...

    @abstractmethod
    def write(self, slot: str, text: str) -> None:
        """Replace the slot's content. Raises StorageError on failure."""
        ...
