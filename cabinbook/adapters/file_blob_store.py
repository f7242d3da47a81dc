"""
Plain-file adapter for BlobStore: one <slot>.json file per slot.

Writes go to a temporary file first and are renamed into place, so a
crash mid-write leaves the previous content intact.
"""

import os
import tempfile
from pathlib import Path

from cabinbook.domain.blob_store import BlobStore, StorageError


class FileBlobStore(BlobStore):

    def __init__(self, directory: str = "data"):
        self._dir = Path(directory)

    def _path(self, slot: str) -> Path:
        return self._dir / f"{slot}.json"

    def read(self, slot: str) -> str | None:
        path = self._path(slot)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc

    def write(self, slot: str, text: str) -> None:
        path = self._path(slot)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{slot}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(text)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc
