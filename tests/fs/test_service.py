"""Tests for reelname.fs.service.LocalFileService."""

from pathlib import Path

import pytest

from reelname.fs import service as service_module
from reelname.fs.service import LocalFileService, validate_pairs
from reelname.models.plan import RenamePair


def _pair(src: Path, dst: Path) -> RenamePair:
    return RenamePair(from_path=str(src), to_path=str(dst))


def test_list_files_sorted_files_only(tmp_path: Path) -> None:
    (tmp_path / "b.mkv").write_text("b")
    (tmp_path / "a.srt").write_text("a")
    (tmp_path / "sub").mkdir()

    files = LocalFileService().list_files(str(tmp_path))

    assert [f.name for f in files] == ["a.srt", "b.mkv"]
    assert files[0].extension == "srt"
    assert files[0].path == str(tmp_path / "a.srt")


def test_list_files_not_a_directory(tmp_path: Path) -> None:
    file = tmp_path / "f.txt"
    file.write_text("x")
    with pytest.raises(NotADirectoryError):
        LocalFileService().list_files(str(file))


def test_apply_renames(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a")
    result = LocalFileService().apply_renames([_pair(tmp_path / "a.txt", tmp_path / "b.txt")])
    assert result.success
    assert (tmp_path / "b.txt").read_text() == "a"


def test_apply_renames_dry_run(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a")
    result = LocalFileService(dry_run=True).apply_renames(
        [_pair(tmp_path / "a.txt", tmp_path / "b.txt")]
    )
    assert result.success
    assert (tmp_path / "a.txt").exists()
    assert not (tmp_path / "b.txt").exists()


def test_apply_renames_rolls_back(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "taken.txt").write_text("taken")
    pairs = [
        _pair(tmp_path / "a.txt", tmp_path / "a2.txt"),
        _pair(tmp_path / "b.txt", tmp_path / "taken.txt"),
    ]

    result = LocalFileService().apply_renames(pairs)

    assert not result.success
    assert result.error
    assert (tmp_path / "a.txt").read_text() == "a"
    assert not (tmp_path / "a2.txt").exists()
    assert (tmp_path / "taken.txt").read_text() == "taken"


def test_validate_pairs_conflicting_targets(tmp_path: Path) -> None:
    (tmp_path / "a").write_text("a")
    (tmp_path / "b").write_text("b")
    pairs = [_pair(tmp_path / "a", tmp_path / "x"), _pair(tmp_path / "b", tmp_path / "x")]
    assert validate_pairs(pairs) == "Conflicting target paths detected"


def test_validate_pairs_missing_source(tmp_path: Path) -> None:
    error = validate_pairs([_pair(tmp_path / "missing", tmp_path / "x")])
    assert error is not None
    assert error.startswith("Source file does not exist")


def test_validate_pairs_traversal(tmp_path: Path) -> None:
    inner = tmp_path / "inner"
    inner.mkdir()
    (inner / "a").write_text("a")
    assert validate_pairs([_pair(inner / "a", tmp_path / "a")]) is not None
    assert validate_pairs([_pair(inner / "a", inner / ".." / "a")]) is not None
    assert validate_pairs([_pair(inner / "a", inner / "b")]) is None


def test_validate_pairs_restoring_allows_parent_folder(tmp_path: Path) -> None:
    inner = tmp_path / "inner"
    inner.mkdir()
    (inner / "a").write_text("a")
    (tmp_path / "b").write_text("b")
    assert validate_pairs([_pair(inner / "a", tmp_path / "a")], restoring=True) is None
    assert validate_pairs([_pair(tmp_path / "b", inner / "b")], restoring=True) is not None


def test_apply_renames_rejects_invalid_batch(tmp_path: Path) -> None:
    result = LocalFileService().apply_renames([_pair(tmp_path / "nope", tmp_path / "x")])
    assert not result.success


def test_undo_renames_counts(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("b")
    result = LocalFileService().undo_renames([_pair(tmp_path / "b.txt", tmp_path / "a.txt")])
    assert result.success
    assert result.restored_count == 1
    assert (tmp_path / "a.txt").exists()


def test_delete_files(tmp_path: Path) -> None:
    for name in ("a", "b"):
        (tmp_path / name).write_text(name)
    result = LocalFileService().delete_files([str(tmp_path / "a"), str(tmp_path / "b")])
    assert result.success
    assert result.deleted_count == 2
    assert not any(tmp_path.iterdir())


def test_delete_files_stops_on_failure(tmp_path: Path) -> None:
    (tmp_path / "a").write_text("a")
    result = LocalFileService().delete_files([str(tmp_path / "a"), str(tmp_path / "missing")])
    assert not result.success
    assert result.deleted_count == 1
    assert result.error


def test_apply_renames_reports_move_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "a").write_text("a")
    (tmp_path / "b").write_text("b")
    calls = []

    def flaky_move(src: Path, dst: Path, *, dry_run: bool = False) -> None:
        calls.append((src, dst))
        raise OSError("disk gone")

    monkeypatch.setattr(service_module, "atomic_move", flaky_move)
    result = LocalFileService().apply_renames([_pair(tmp_path / "a", tmp_path / "c")])
    assert not result.success
    assert "disk gone" in (result.error or "")
    assert len(calls) == 1
