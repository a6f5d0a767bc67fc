"""Domain models for the reelname application."""

from reelname.models.core import (
    ClassificationResult,
    ClassifiedFile,
    EpisodeInfo,
    FileDescriptor,
    MediaType,
    PatternType,
)
from reelname.models.history import (
    ApplyResult,
    DeleteResult,
    RenameHistoryEntry,
    UndoResult,
)
from reelname.models.plan import (
    FileGroup,
    GroupPreview,
    NamingPattern,
    PreviewRow,
    RenamePair,
    SeriesMetadata,
)
from reelname.models.rules import RenameOptions, RenameRule, SeriesOptions

__all__ = [
    "ApplyResult",
    "ClassificationResult",
    "ClassifiedFile",
    "DeleteResult",
    "EpisodeInfo",
    "FileDescriptor",
    "FileGroup",
    "GroupPreview",
    "MediaType",
    "NamingPattern",
    "PatternType",
    "PreviewRow",
    "RenameHistoryEntry",
    "RenameOptions",
    "RenamePair",
    "RenameRule",
    "SeriesMetadata",
    "SeriesOptions",
    "UndoResult",
]
