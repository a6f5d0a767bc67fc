"""Naming templates for series renames.

A template is a string with placeholders from a fixed set:

- ``{series}``  series name as given
- ``{season}``  season, two digits
- ``{episode}`` episode, two digits
- ``{sxe}``     ``S01E05`` (``E05`` without a season)
- ``{xsep}``    ``1x05`` (``05`` without a season)

Expansion is purely textual. The original extension is appended afterwards,
and subtitles keep their language tag in front of it (``name.Fa.srt``) so a
rename does not lose the language.

Validation returns a message instead of raising, so callers can show it next
to the input that produced it.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from reelname.core.episode_parser import format_sxe, format_xsep, pad_episode
from reelname.models.core import ClassifiedFile, EpisodeInfo, MediaType
from reelname.models.plan import (
    FilePreview,
    FileGroup,
    GroupPreview,
    NamingPattern,
    SeriesMetadata,
)

PLACEHOLDERS: tuple[str, ...] = ("series", "season", "episode", "sxe", "xsep")

CUSTOM_PATTERN_ID = "custom"

PREDEFINED_PATTERNS: tuple[NamingPattern, ...] = (
    NamingPattern(
        id="sxe-dash", label="pattern_sxe_dash", template="{series} - S{season}E{episode}"
    ),
    NamingPattern(
        id="sxe-dot", label="pattern_sxe_dot", template="{series}.S{season}E{episode}"
    ),
    NamingPattern(
        id="sxe-space", label="pattern_sxe_space", template="{series} S{season}E{episode}"
    ),
    NamingPattern(id="xsep", label="pattern_xsep", template="{series} - {season}x{episode}"),
    NamingPattern(
        id="episode-only", label="pattern_episode_only", template="{series} - E{episode}"
    ),
    NamingPattern(id="persian", label="pattern_persian", template="{series} - قسمت {episode}"),
    NamingPattern(id="simple", label="pattern_simple", template="{series} {episode}"),
)

INVALID_TEMPLATE_CHARS = re.compile(r'[<>:"\\|?*]')
_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


def get_pattern_by_id(pattern_id: str) -> Optional[NamingPattern]:
    return next((p for p in PREDEFINED_PATTERNS if p.id == pattern_id), None)


def extract_placeholders(template: str) -> List[str]:
    """Return the placeholder names used in *template*, in order."""
    return _PLACEHOLDER_RE.findall(template)


def validate_template(template: str) -> Optional[str]:
    """Validate a custom template.

    Returns:
        An error message, or None when the template is usable.
    """
    if not template.strip():
        return "Template cannot be empty"
    if INVALID_TEMPLATE_CHARS.search(template):
        return 'Template contains invalid characters (< > : " \\ | ? *)'
    if not any(name in PLACEHOLDERS for name in extract_placeholders(template)):
        return "Template must contain at least one placeholder, e.g. {series}"
    return None


def create_custom_pattern(label: str, template: str) -> NamingPattern:
    return NamingPattern(
        id=f"custom-{int(time.time() * 1000)}",
        label=label,
        template=template,
        is_custom=True,
    )


def expand_template(
    template: str, metadata: SeriesMetadata, episode_info: EpisodeInfo
) -> str:
    """Substitute all placeholders in *template* without adding an extension."""
    season = metadata.season if metadata.season is not None else episode_info.season
    episode = episode_info.episode
    values = {
        "series": metadata.name,
        "season": pad_episode(season) if season is not None else "",
        "episode": pad_episode(episode),
        "sxe": format_sxe(season, episode),
        "xsep": format_xsep(season, episode),
    }
    return _PLACEHOLDER_RE.sub(
        lambda m: values.get(m.group(1), m.group(0)), template
    )


def build_filename(
    template: str,
    metadata: SeriesMetadata,
    episode_info: EpisodeInfo,
    file: ClassifiedFile,
) -> str:
    """Build the target filename for *file* from *template*.

    Args:
        template: Naming template.
        metadata: Series name and season.
        episode_info: Episode of the group the file belongs to.
        file: The file being renamed; supplies extension and language.

    Returns:
        The new filename including extension.
    """
    result = expand_template(template, metadata, episode_info)
    if not file.extension:
        return result
    if file.media_type is MediaType.SUBTITLE and file.language:
        return f"{result}.{file.language}.{file.extension}"
    return f"{result}.{file.extension}"


def build_pattern_preview(
    groups: Sequence[FileGroup], metadata: SeriesMetadata
) -> List[GroupPreview]:
    """Expand ``metadata.pattern`` for every file of every group.

    A group conflicts when its new video name (case-insensitive) was already
    produced by an earlier group.
    """
    results: List[GroupPreview] = []
    used_names: set[str] = set()
    for group in groups:

        def _name(file: ClassifiedFile, group: FileGroup = group) -> str:
            return build_filename(metadata.pattern, metadata, group.episode_info, file)

        video_name = _name(group.video_file)
        key = video_name.lower()
        has_conflict = key in used_names
        used_names.add(key)
        results.append(
            GroupPreview(
                group_id=group.id,
                original_video_name=group.video_file.name,
                new_video_name=video_name,
                subtitle_previews=[
                    FilePreview(original=sub.name, new=_name(sub))
                    for sub in group.subtitle_files
                ],
                dub_previews=[
                    FilePreview(original=dub.name, new=_name(dub))
                    for dub in group.dubbing_files
                ],
                has_conflict=has_conflict,
            )
        )
    return results


def detect_metadata_from_groups(groups: Sequence[FileGroup]) -> Dict[str, object]:
    """Guess series name, season and first episode from built groups.

    Returns:
        Dict with ``season`` and ``start_episode`` and, when groups exist,
        ``name``.
    """
    if not groups:
        return {"season": 1, "start_episode": 1}

    base_name = re.sub(r"\.[^.]+$", "", groups[0].video_file.name)
    name = re.sub(r"[Ss]\d{1,2}[Ee]\d{1,3}", "", base_name, count=1)
    name = re.sub(r"\d{1,2}[xX]\d{1,3}", "", name, count=1)
    name = re.sub(r"[._\-]+$", "", name)
    name = re.sub(r"[._]", " ", name).strip()

    seasons = [g.episode_info.season for g in groups if g.episode_info.season is not None]
    episodes = [g.episode_info.episode for g in groups]
    return {
        "name": name,
        "season": min(seasons) if seasons else 1,
        "start_episode": min(episodes),
    }


def apply_renumbering(groups: Sequence[FileGroup], start_episode: int) -> List[FileGroup]:
    """Return episode-sorted copies of *groups* numbered from *start_episode*."""
    ordered = sorted(groups, key=lambda g: g.episode_info.episode)
    return [
        group.model_copy(
            update={
                "episode_info": group.episode_info.model_copy(
                    update={"episode": start_episode + index}
                )
            }
        )
        for index, group in enumerate(ordered)
    ]


def suggest_patterns(groups: Sequence[FileGroup]) -> List[NamingPattern]:
    """Suggest templates that fit the detected numbering."""
    if not groups:
        return list(PREDEFINED_PATTERNS[:3])
    if any(g.episode_info.season is not None for g in groups):
        return [p for p in PREDEFINED_PATTERNS if "sxe" in p.id or p.id == "xsep"]
    return [
        p for p in PREDEFINED_PATTERNS if p.id in {"episode-only", "simple", "persian"}
    ]


@dataclass
class PatternBuilderState:
    """Selected pattern plus the custom template being edited."""

    selected_pattern_id: Optional[str] = PREDEFINED_PATTERNS[0].id
    custom_template: str = "{series} - S{season}E{episode}"
    metadata: SeriesMetadata = field(default_factory=SeriesMetadata)

    def active_template(self) -> str:
        if self.selected_pattern_id == CUSTOM_PATTERN_ID:
            return self.custom_template
        pattern = get_pattern_by_id(self.selected_pattern_id or "")
        return pattern.template if pattern else self.custom_template
