"""Filesystem collaborators for reelname."""

from reelname.fs.service import FileService, LocalFileService
from reelname.fs.storage import (
    STORAGE_KEY,
    HistoryStore,
    JsonFileHistoryStore,
    MemoryHistoryStore,
    get_reelname_dir,
)

__all__ = [
    "STORAGE_KEY",
    "FileService",
    "HistoryStore",
    "JsonFileHistoryStore",
    "LocalFileService",
    "MemoryHistoryStore",
    "get_reelname_dir",
]
