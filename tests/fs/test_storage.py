"""Tests for reelname.fs.storage (history stores and the ~/.reelname dir)."""

from pathlib import Path

import pytest

from reelname.fs.storage import (
    STORAGE_KEY,
    JsonFileHistoryStore,
    MemoryHistoryStore,
    get_reelname_dir,
)


def test_get_reelname_dir_uses_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CI", raising=False)
    reelname_dir = get_reelname_dir()
    assert reelname_dir == tmp_path / ".reelname"
    assert reelname_dir.is_dir()


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileHistoryStore(tmp_path / "history.json")
    assert store.load() is None
    store.save('[{"id": "x"}]')
    assert store.load() == b'[{"id": "x"}]'
    assert not (tmp_path / "history.json.tmp").exists()


def test_json_file_store_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CI", raising=False)
    store = JsonFileHistoryStore()
    assert store.path == tmp_path / ".reelname" / f"{STORAGE_KEY}.json"


def test_memory_store_keyed() -> None:
    store = MemoryHistoryStore()
    assert store.load() is None
    store.save("[]")
    assert store.load() == "[]"
    assert MemoryHistoryStore(key="other").load() is None
