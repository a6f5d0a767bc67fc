"""Core domain models for reelname.

This module defines the foundational data structures shared by classification,
episode extraction, grouping and preview building.
- FileDescriptor is the externally sourced unit of work; its path identifies a
  file within one batch.
- ClassifiedFile and EpisodeInfo are derived values, recomputed on every
  planning pass and never mutated in place (all three models are frozen).

Design:
- MediaType and PatternType are str enums so they serialize as plain strings
  in JSON output and in the persisted undo history.
"""

from enum import Enum
from pathlib import PurePath
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MediaType(str, Enum):
    """Media category of a file, decided purely by its extension."""

    VIDEO = "video"
    SUBTITLE = "subtitle"
    DUBBING = "dubbing"
    OTHER = "other"


class PatternType(str, Enum):
    """Which episode pattern produced an EpisodeInfo.

    ``NUMBER`` marks a positional fallback, ``NONE`` is reserved for callers
    that need an explicit "nothing matched" marker.
    """

    SXE = "sxe"
    XSEP = "xsep"
    EPISODE = "episode"
    NUMBER = "number"
    NONE = "none"


class FileDescriptor(BaseModel):
    """A file as reported by the filesystem service."""

    model_config = ConfigDict(frozen=True)

    path: str
    """Full path of the file. Unique within a batch."""

    name: str
    """Last path segment, including the extension."""

    extension: str = ""
    """Extension without the leading dot (empty for dotfiles and bare names)."""

    @classmethod
    def from_path(cls, path: str) -> "FileDescriptor":
        """Build a descriptor from a path string.

        Args:
            path: Path to the file. Only its last segment is inspected.

        Returns:
            FileDescriptor with ``name`` and ``extension`` derived from *path*.
        """
        name = PurePath(path).name
        dot = name.rfind(".")
        extension = name[dot + 1 :] if dot > 0 else ""
        return cls(path=path, name=name, extension=extension)


class ClassifiedFile(FileDescriptor):
    """FileDescriptor with its media type and, for subtitles, a language tag."""

    media_type: MediaType
    """Exactly one media category per file."""

    language: Optional[str] = None
    """Language tag as written in the filename (e.g. ``Fa``, ``English``)."""


class EpisodeInfo(BaseModel):
    """Season/episode numbers parsed from a filename."""

    model_config = ConfigDict(frozen=True)

    season: Optional[int] = None
    episode: int
    raw_match: str = ""
    """The substring the pattern matched, kept for debugging."""
    pattern_type: PatternType = PatternType.NONE


class ClassificationResult(BaseModel):
    """Files of one batch partitioned by media type, input order preserved."""

    videos: List[ClassifiedFile] = Field(default_factory=list)
    subtitles: List[ClassifiedFile] = Field(default_factory=list)
    dubs: List[ClassifiedFile] = Field(default_factory=list)
    others: List[ClassifiedFile] = Field(default_factory=list)
