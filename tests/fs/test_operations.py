"""Unit tests for reelname.fs.operations.atomic_move.

Covers:
- Basic atomic move on the same filesystem
- Cross-device move fallback (EXDEV)
- Windows long path prefixing
- Dry-run mode (no-op)
- Overwrite protection
"""

import errno
import sys
from pathlib import Path

import pytest

from reelname.fs.operations import WIN_MAX_PATH, atomic_move, get_win_long_path_prefix


def test_atomic_move_basic(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("hello world")

    atomic_move(src, dst)

    assert not src.exists()
    assert dst.read_text() == "hello world"


def test_cross_device(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """atomic_move falls back to copy+unlink on EXDEV."""
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("cross device")

    def raise_exdev(self: Path, target: Path) -> None:
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(Path, "rename", raise_exdev)

    atomic_move(src, dst)

    assert not src.exists()
    assert dst.read_text() == "cross device"


def test_other_os_errors_propagate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    src = tmp_path / "source.txt"
    src.write_text("x")

    def raise_eacces(self: Path, target: Path) -> None:
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(Path, "rename", raise_eacces)

    with pytest.raises(OSError):
        atomic_move(src, tmp_path / "dest.txt")
    assert src.exists()


def test_dry_run(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("dry run")

    atomic_move(src, dst, dry_run=True)

    assert src.exists()
    assert not dst.exists()


def test_destination_exists(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("new")
    dst.write_text("old")

    with pytest.raises(FileExistsError):
        atomic_move(src, dst)
    assert dst.read_text() == "old"


def test_missing_source(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        atomic_move(tmp_path / "missing.txt", tmp_path / "dest.txt")


def test_win_long_path_prefix() -> None:
    assert get_win_long_path_prefix() == "\\\\?\\"
    assert WIN_MAX_PATH == 259


@pytest.mark.skipif(sys.platform != "win32", reason="Windows only")
def test_windows_long_path(tmp_path: Path) -> None:
    long_dir = tmp_path / ("a" * 200)
    long_dir.mkdir()
    src = long_dir / ("b" * 50 + ".txt")
    dst = long_dir / ("c" * 50 + ".txt")
    src.write_text("long")

    atomic_move(src, dst)

    assert dst.exists()
