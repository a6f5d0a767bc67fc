"""Filesystem service used to list, rename and delete files.

The planning engine never touches disk. Hosts hand it the FileDescriptors
returned by ``list_files`` and pass the resulting RenamePairs back to
``apply_renames``. All failures are reported through result objects.

LocalFileService applies a batch transactionally: if any move fails, the
moves already performed are rolled back in reverse order.
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from reelname.core.planner import conflicting_targets
from reelname.fs.operations import atomic_move
from reelname.models.core import FileDescriptor
from reelname.models.history import ApplyResult, DeleteResult, UndoResult
from reelname.models.plan import RenamePair

logger = logging.getLogger(__name__)


class FileService(Protocol):
    """Operations the host's filesystem layer must provide."""

    def list_files(self, folder: str) -> List[FileDescriptor]: ...

    def apply_renames(self, pairs: Sequence[RenamePair]) -> ApplyResult: ...

    def undo_renames(self, pairs: Sequence[RenamePair]) -> UndoResult: ...

    def delete_files(self, paths: Sequence[str]) -> DeleteResult: ...


def validate_pairs(
    pairs: Sequence[RenamePair], *, restoring: bool = False
) -> Optional[str]:
    """Check a batch before any file is moved.

    A forward batch may only move files into their own folder or below it.
    A restoring batch inverts one, so its targets must contain their sources.

    Returns:
        An error message, or None when the batch may be applied.
    """
    if conflicting_targets(pairs):
        return "Conflicting target paths detected"
    for pair in pairs:
        source = Path(pair.from_path)
        target = Path(pair.to_path)
        if not source.exists():
            return f"Source file does not exist: {pair.from_path}"
        if ".." in target.parts:
            return "Invalid path components detected"
        inner, outer = (source, target) if restoring else (target, source)
        if not inner.parent.is_relative_to(outer.parent):
            return "Path traversal detected: target path outside allowed directory"
    return None


class LocalFileService:
    """FileService backed by the local filesystem."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def list_files(self, folder: str) -> List[FileDescriptor]:
        """List regular files directly inside *folder*, sorted by name.

        Raises:
            NotADirectoryError: If *folder* is not a directory.
        """
        root = Path(folder)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {folder}")
        return [
            FileDescriptor.from_path(str(entry))
            for entry in sorted(root.iterdir(), key=lambda p: p.name)
            if entry.is_file()
        ]

    def apply_renames(self, pairs: Sequence[RenamePair]) -> ApplyResult:
        """Apply *pairs*, rolling back already-moved files on failure."""
        return self._move_batch(pairs, restoring=False)

    def _move_batch(self, pairs: Sequence[RenamePair], restoring: bool) -> ApplyResult:
        error = validate_pairs(pairs, restoring=restoring)
        if error:
            return ApplyResult(success=False, error=error)

        rollback_stack: List[Tuple[Path, Path]] = []
        for pair in pairs:
            source, target = Path(pair.from_path), Path(pair.to_path)
            try:
                if not self.dry_run:
                    target.parent.mkdir(parents=True, exist_ok=True)
                atomic_move(source, target, dry_run=self.dry_run)
            except OSError as e:
                logger.error("Rename %s -> %s failed: %s", source, target, e)
                self._rollback(rollback_stack)
                return ApplyResult(success=False, error=str(e))
            rollback_stack.append((source, target))
        logger.info("Applied %d renames", len(pairs))
        return ApplyResult(success=True)

    def _rollback(self, moved: List[Tuple[Path, Path]]) -> None:
        for source, target in reversed(moved):
            try:
                atomic_move(target, source, dry_run=self.dry_run)
            except OSError as e:
                logger.error("Rollback of %s -> %s failed: %s", target, source, e)

    def undo_renames(self, pairs: Sequence[RenamePair]) -> UndoResult:
        """Apply inverse pairs produced by the undo ledger."""
        result = self._move_batch(pairs, restoring=True)
        return UndoResult(
            success=result.success,
            restored_count=len(pairs) if result.success else 0,
            error=result.error,
        )

    def delete_files(self, paths: Sequence[str]) -> DeleteResult:
        """Delete *paths*, stopping at the first failure."""
        deleted = 0
        for path in paths:
            try:
                if not self.dry_run:
                    Path(path).unlink()
            except OSError as e:
                logger.error("Delete of %s failed: %s", path, e)
                return DeleteResult(success=False, deleted_count=deleted, error=str(e))
            deleted += 1
        return DeleteResult(success=True, deleted_count=deleted)
