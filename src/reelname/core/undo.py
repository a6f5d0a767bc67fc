"""Undo ledger for applied rename batches.

The ledger keeps the most recent rename batches (newest first, bounded) as
RenameHistoryEntry records whose ``pairs`` are the mechanical inverse of the
applied pairs. It is an ordinary object owned by the host application and
passed to whatever needs it; persistence and the actual file moves are
delegated to injected collaborators.

Undo removes an entry only after the filesystem service reports success, so a
failed undo can be retried.
"""

import logging
import threading
import time
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from reelname.models.history import RenameHistoryEntry, UndoResult
from reelname.models.plan import RenamePair

if TYPE_CHECKING:
    from reelname.fs.service import FileService
    from reelname.fs.storage import HistoryStore

logger = logging.getLogger(__name__)

MAX_HISTORY = 10

_HISTORY_ADAPTER = TypeAdapter(List[RenameHistoryEntry])


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_history_entry(
    original_pairs: Sequence[RenamePair],
    folder: str,
    description: str,
) -> RenameHistoryEntry:
    """Create a history entry whose ``pairs`` invert *original_pairs*."""
    timestamp = _now_ms()
    return RenameHistoryEntry(
        id=f"undo_{timestamp}_{uuid.uuid4().hex[:9]}",
        timestamp=timestamp,
        pairs=[pair.inverse() for pair in original_pairs],
        original_pairs=list(original_pairs),
        folder=folder,
        description=description,
    )


def format_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    """Describe a millisecond timestamp relative to *now*."""
    now = _now_ms() if now is None else now
    seconds = (now - timestamp) // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if days < 7:
        return f"{days} day{'s' if days != 1 else ''} ago"
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d")


class UndoLedger:
    """Bounded, most-recent-first history of applied rename batches.

    Access is serialized with a lock so the ledger may be shared between
    threads of one host.
    """

    def __init__(
        self,
        store: "Optional[HistoryStore]" = None,
        capacity: int = MAX_HISTORY,
    ) -> None:
        """Create a ledger.

        Args:
            store: Optional persistence collaborator. Without one the history
                lives in memory only.
            capacity: Maximum number of entries kept; older ones are evicted.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._store = store
        self._capacity = capacity
        self._history: List[RenameHistoryEntry] = []
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Replace the in-memory history with the persisted one.

        Unreadable data is logged and results in an empty history.
        """
        if self._store is None:
            return
        with self._lock:
            try:
                blob = self._store.load()
            except OSError as e:
                logger.error("Failed to read undo history: %s", e)
                blob = None
            if not blob:
                self._history = []
                return
            try:
                entries = _HISTORY_ADAPTER.validate_json(blob)
            except ValidationError as e:
                logger.error("Failed to load undo history: %s", e)
                entries = []
            self._history = entries[: self._capacity]

    def _save(self) -> None:
        if self._store is None:
            return
        blob = _HISTORY_ADAPTER.dump_json(self._history, by_alias=True).decode("utf-8")
        try:
            self._store.save(blob)
        except OSError as e:
            logger.error("Failed to save undo history: %s", e)

    # ------------------------------------------------------------------
    # History operations
    # ------------------------------------------------------------------
    def add(self, entry: RenameHistoryEntry) -> None:
        """Push *entry* to the front, evicting the oldest beyond capacity."""
        with self._lock:
            self._history.insert(0, entry)
            del self._history[self._capacity :]
            self._save()

    def record(
        self,
        forward_pairs: Sequence[RenamePair],
        folder: str = "",
        description: str = "",
    ) -> RenameHistoryEntry:
        """Record an applied batch and return its history entry."""
        entry = create_history_entry(forward_pairs, folder, description)
        self.add(entry)
        logger.info("Recorded %d renames for undo (%s)", len(forward_pairs), entry.id)
        return entry

    def peek(self) -> Optional[RenameHistoryEntry]:
        with self._lock:
            return self._history[0] if self._history else None

    def can_undo(self) -> bool:
        return self.peek() is not None

    def entries(self) -> List[RenameHistoryEntry]:
        """Return a copy of the history, newest first."""
        with self._lock:
            return list(self._history)

    def remove(self, entry_id: str) -> None:
        with self._lock:
            self._history = [e for e in self._history if e.id != entry_id]
            self._save()

    def pop(self) -> Optional[RenameHistoryEntry]:
        """Remove and return the newest entry."""
        with self._lock:
            if not self._history:
                return None
            entry = self._history.pop(0)
            self._save()
            return entry

    def clear(self) -> None:
        with self._lock:
            self._history = []
            self._save()

    def undo(self, service: "FileService") -> UndoResult:
        """Reverse the newest batch through *service*.

        The entry is removed only when the service reports success; otherwise
        it stays at the head of the history.
        """
        with self._lock:
            entry = self.peek()
            if entry is None:
                return UndoResult(success=False, error="No operation to undo")
            try:
                result = service.undo_renames(entry.pairs)
            except OSError as e:
                logger.error("Undo of %s failed: %s", entry.id, e)
                return UndoResult(success=False, error=str(e))
            if not result.success:
                logger.warning("Undo of %s failed: %s", entry.id, result.error)
                return UndoResult(success=False, error=result.error or "Failed to undo")
            self.remove(entry.id)
            logger.info("Undid %s (%d files restored)", entry.id, result.restored_count)
            return UndoResult(success=True, restored_count=result.restored_count)
