"""Models for rename plans.

This module defines the data structures produced by a planning pass:
- FileGroup: a video with its attached subtitles and dubs (series mode).
- PreviewRow: one planned rename per input file (flat mode).
- RenamePair: the absolute source/target pair handed to the filesystem
  service.
- NamingPattern / SeriesMetadata: inputs to template expansion.

Groups and rows are rebuilt from scratch for each batch; nothing here is
updated incrementally.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from reelname.models.core import ClassifiedFile, EpisodeInfo

__all__: list[str] = [
    "FileGroup",
    "GroupPreview",
    "NamingPattern",
    "PreviewRow",
    "RenamePair",
    "SeriesMetadata",
]


class FileGroup(BaseModel):
    """A video file plus the subtitle and dubbing files attached to it."""

    id: str
    episode_info: EpisodeInfo
    video_file: ClassifiedFile
    subtitle_files: List[ClassifiedFile] = Field(default_factory=list)
    dubbing_files: List[ClassifiedFile] = Field(default_factory=list)
    other_files: List[ClassifiedFile] = Field(default_factory=list)
    """Reserved for unrecognised files; the grouper leaves it empty."""

    confidence: float = 0.5
    """Informational match score in [0, 1]; never used for filtering."""

    has_conflict: bool = False
    selected: bool = True

    def all_files(self) -> List[ClassifiedFile]:
        """Return the video followed by its subtitles and dubs."""
        return [self.video_file, *self.subtitle_files, *self.dubbing_files]


class NamingPattern(BaseModel):
    """A named template such as ``{series} - S{season}E{episode}``."""

    id: str
    label: str
    template: str
    is_custom: bool = False


class SeriesMetadata(BaseModel):
    """Series-wide values substituted into a naming template."""

    name: str = ""
    season: Optional[int] = 1
    start_episode: int = 1
    pattern: str = "{series} - S{season}E{episode}"


class PreviewRow(BaseModel):
    """Planned rename of a single file.

    ``new_name`` and ``new_path`` are None when the rule pipeline leaves the
    name unchanged.
    """

    path: str
    old_name: str
    new_name: Optional[str] = None
    new_path: Optional[str] = None
    changed: bool = False
    conflict: bool = False


class RenamePair(BaseModel):
    """Source and target path of one rename, serialized as ``from``/``to``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_path: str = Field(alias="from")
    to_path: str = Field(alias="to")

    def inverse(self) -> "RenamePair":
        """Return the pair that undoes this one."""
        return RenamePair(from_path=self.to_path, to_path=self.from_path)


class FilePreview(BaseModel):
    """Original and planned name of one file inside a group preview."""

    original: str
    new: str


class GroupPreview(BaseModel):
    """Template expansion result for one FileGroup."""

    group_id: str
    original_video_name: str
    new_video_name: str
    subtitle_previews: List[FilePreview] = Field(default_factory=list)
    dub_previews: List[FilePreview] = Field(default_factory=list)
    has_conflict: bool = False
