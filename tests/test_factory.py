"""
Environment-driven wiring.
"""

import pytest

from cabinbook.adapters.claude_summarizer import ClaudeSummarizer
from cabinbook.adapters.file_blob_store import FileBlobStore
from cabinbook.adapters.simulator_blob_store import InMemoryBlobStore
from cabinbook.adapters.simulator_summarizer import SimulatorSummarizer
from cabinbook.adapters.sqlite_blob_store import SqliteBlobStore
from cabinbook.domain.blob_store import StorageError
from cabinbook.factory import (
    create_blob_store,
    create_insight_requester,
    create_store,
    create_summarizer,
)
from cabinbook.insights import NOT_CONFIGURED_MESSAGE


def test_default_backend_is_sqlite(monkeypatch, tmp_path):
    monkeypatch.delenv("CABINBOOK_STORAGE", raising=False)
    monkeypatch.setenv("DB_PATH", str(tmp_path / "sub" / "cabinbook.db"))
    assert isinstance(create_blob_store(), SqliteBlobStore)
    assert (tmp_path / "sub").is_dir()


def test_file_backend(monkeypatch, tmp_path):
    monkeypatch.setenv("CABINBOOK_STORAGE", "file")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    assert isinstance(create_blob_store(), FileBlobStore)


def test_explicit_backend_wins(monkeypatch):
    monkeypatch.setenv("CABINBOOK_STORAGE", "file")
    assert isinstance(create_blob_store("memory"), InMemoryBlobStore)


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        create_blob_store("floppy")


def test_summarizer_unconfigured_without_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    summarizer = create_summarizer()
    assert isinstance(summarizer, ClaudeSummarizer)
    assert summarizer.configured is False


def test_summarizer_configured_with_key(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("INSIGHTS_MODEL", "claude-sonnet-4-5")
    assert create_summarizer().configured is True


def test_store_uses_cabin_count(monkeypatch):
    monkeypatch.setenv("CABIN_COUNT", "5")
    store = create_store(InMemoryBlobStore())
    store.load()
    assert len(store.cabins) == 5


@pytest.mark.asyncio
async def test_requester_without_key_gives_hint(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    requester = create_insight_requester()
    assert await requester.request([], []) == NOT_CONFIGURED_MESSAGE


def test_requester_uses_property_name(monkeypatch):
    monkeypatch.setenv("PROPERTY_NAME", "Lakeview Lodges")
    requester = create_insight_requester(SimulatorSummarizer())
    assert "Lakeview Lodges" in requester.build_prompt([], [])


@pytest.mark.parametrize("count", ["eight", "0", "-2"])
def test_store_rejects_unusable_cabin_count(monkeypatch, count):
    monkeypatch.setenv("CABIN_COUNT", count)
    with pytest.raises(ValueError, match="CABIN_COUNT"):
        create_store(InMemoryBlobStore())


def test_sqlite_backend_under_a_file_raises_storage_error(monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    monkeypatch.setenv("DB_PATH", str(blocker / "cabinbook.db"))
    with pytest.raises(StorageError):
        create_blob_store("sqlite")
