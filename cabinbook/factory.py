import os

from cabinbook.domain.blob_store import BlobStore, StorageError
from cabinbook.domain.models import DEFAULT_CABIN_COUNT
from cabinbook.domain.summarizer import Summarizer
from cabinbook.insights import DEFAULT_PROPERTY_NAME, InsightRequester
from cabinbook.store import EntityStore


def create_blob_store(backend: str | None = None) -> BlobStore:
    """
    Factory: create the right storage adapter based on config.

    The backend can be passed explicitly or read from the
    CABINBOOK_STORAGE env var. Defaults to "sqlite".
    """
    backend = backend or os.environ.get("CABINBOOK_STORAGE", "sqlite")

    if backend == "sqlite":
        from cabinbook.adapters.sqlite_blob_store import SqliteBlobStore

        db_path = os.environ.get("DB_PATH", "data/cabinbook.db")
        if db_path != ":memory:" and os.path.dirname(db_path):
            try:
                os.makedirs(os.path.dirname(db_path), exist_ok=True)
            except OSError as exc:
                raise StorageError(f"cannot create {os.path.dirname(db_path)}: {exc}") from exc
        return SqliteBlobStore(db_path=db_path)

    if backend == "file":
        from cabinbook.adapters.file_blob_store import FileBlobStore

        return FileBlobStore(directory=os.environ.get("DATA_DIR", "data"))

    if backend == "memory":
        from cabinbook.adapters.simulator_blob_store import InMemoryBlobStore

        return InMemoryBlobStore()

    raise ValueError(f"Unknown storage backend: {backend!r}")


def create_summarizer() -> Summarizer:
    """Claude-backed summarizer; unconfigured when ANTHROPIC_API_KEY is unset."""
    from cabinbook.adapters.claude_summarizer import ClaudeSummarizer

    model = os.environ.get("INSIGHTS_MODEL")
    if model:
        return ClaudeSummarizer(api_key=os.environ.get("ANTHROPIC_API_KEY", ""), model=model)
    return ClaudeSummarizer(api_key=os.environ.get("ANTHROPIC_API_KEY", ""))


def create_store(blob_store: BlobStore | None = None) -> EntityStore:
    """Raises ValueError for a bad CABIN_COUNT and StorageError for unusable storage."""
    raw = os.environ.get("CABIN_COUNT", str(DEFAULT_CABIN_COUNT))
    try:
        cabin_count = int(raw)
    except ValueError:
        raise ValueError(f"CABIN_COUNT must be a whole number, got {raw!r}") from None
    if cabin_count < 1:
        raise ValueError(f"CABIN_COUNT must be at least 1, got {cabin_count}")
    return EntityStore(blob_store or create_blob_store(), cabin_count=cabin_count)


def create_insight_requester(summarizer: Summarizer | None = None) -> InsightRequester:
    return InsightRequester(
        summarizer or create_summarizer(),
        property_name=os.environ.get("PROPERTY_NAME", DEFAULT_PROPERTY_NAME),
    )
