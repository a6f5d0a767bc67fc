"""Filesystem atomic move operations for reelname.

Provides a cross-platform, atomic file-move helper that underpins apply and
undo. Handles cross-device moves, Windows long paths, and dry-run.
"""

import errno
import logging
import shutil
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

WIN_MAX_PATH = 259  # Windows MAX_PATH limit for NTFS long paths


def get_win_long_path_prefix() -> str:
    """Return the Windows NTFS long path prefix (``\\\\?\\``)."""
    bslash = chr(92)
    return bslash + bslash + "?" + bslash


def _win_long_path(path: Path) -> str:
    s = str(path)
    prefix = get_win_long_path_prefix()
    if sys.platform == "win32" and len(s) > WIN_MAX_PATH and not s.startswith(prefix):
        return prefix + s
    return s


def atomic_move(src: Path, dst: Path, *, dry_run: bool = False) -> None:
    """Atomically move *src* to *dst*.

    Falls back to copy-and-delete when the move crosses devices.

    Args:
        src: Source file path.
        dst: Destination file path.
        dry_run: If True, log the intended move and do nothing.

    Raises:
        FileExistsError: If *dst* already exists.
        FileNotFoundError: If *src* is missing.
        OSError: For non-recoverable FS errors.

    Example:
        >>> from pathlib import Path
        >>> from reelname.fs.operations import atomic_move
        >>> src = Path('a.txt')
        >>> dst = Path('b.txt')
        >>> src.write_text('hello')
        >>> atomic_move(src, dst)
        >>> dst.read_text()
        'hello'
    """
    if dry_run:
        logger.info("[dry run] Would move %s -> %s", src, dst)
        return
    if dst.exists():
        raise FileExistsError(f"Destination {dst} already exists.")
    src_path = _win_long_path(src)
    dst_path = _win_long_path(dst)
    try:
        Path(src_path).rename(dst_path)
    except OSError as e:
        if e.errno == errno.EXDEV:
            shutil.copy2(src_path, dst_path)
            Path(src_path).unlink()
        else:
            raise
