"""Key-value persistence for the undo history.

The UndoLedger serializes its entries to an opaque JSON blob and hands it to a
HistoryStore under the fixed STORAGE_KEY. JsonFileHistoryStore keeps the blob
in ``~/.reelname/<key>.json``; MemoryHistoryStore keeps it in memory for tests
and embedding hosts.
"""

import logging
import os
import platform
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

STORAGE_KEY = "reelname_undo_history"
WINDOWS_OS = "Windows"


class HistoryStore(Protocol):
    """Load/save of a serialized history blob."""

    def load(self) -> Optional[Union[str, bytes]]: ...

    def save(self, blob: str) -> None: ...


def get_reelname_dir() -> Path:
    """Return the ``.reelname`` directory in the user's home, creating it.

    Returns:
        Path to the ``.reelname`` directory.
    """
    # In CI environments HOME may not be set on Windows
    home_dir = os.environ.get("HOME")
    is_windows_ci = platform.system() == WINDOWS_OS and os.environ.get("CI") == "true"
    if not home_dir or is_windows_ci:
        home_dir = os.environ.get("USERPROFILE", str(Path.home()))

    reelname_dir = Path(home_dir) / ".reelname"
    if not reelname_dir.exists():
        reelname_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created reelname directory at {reelname_dir}")
    return reelname_dir


class JsonFileHistoryStore:
    """HistoryStore writing one JSON file per storage key."""

    def __init__(self, path: Optional[Path] = None, key: str = STORAGE_KEY) -> None:
        self._path = path
        self.key = key

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = get_reelname_dir() / f"{self.key}.json"
        return self._path

    def load(self) -> Optional[bytes]:
        """Return the raw file contents; decoding is left to the reader."""
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def save(self, blob: str) -> None:
        """Write *blob* through a temporary file so readers never see half of it."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(blob, encoding="utf-8")
        tmp_path.replace(self.path)


class MemoryHistoryStore:
    """In-memory HistoryStore keyed like the file store."""

    def __init__(self, key: str = STORAGE_KEY) -> None:
        self.key = key
        self._data: Dict[str, str] = {}

    def load(self) -> Optional[str]:
        return self._data.get(self.key)

    def save(self, blob: str) -> None:
        self._data[self.key] = blob
