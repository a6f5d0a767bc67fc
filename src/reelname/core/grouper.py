"""Group video files with their subtitles and dubs.

Groups are video-centric: every video in the batch yields exactly one
FileGroup, in a deterministic order, and each subtitle or dub is attached to
at most one group. Attachment is decided by equal episode numbers first and
by normalized-name similarity second; leftovers get one more chance through
episode numbers alone.
"""

import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from reelname.core.classifier import classify_files
from reelname.core.episode_parser import compare_names, extract_episode_info
from reelname.core.fuzzy_matcher import similarity
from reelname.models.core import (
    ClassifiedFile,
    EpisodeInfo,
    FileDescriptor,
    MediaType,
    PatternType,
)
from reelname.models.plan import FileGroup

logger = logging.getLogger(__name__)

DEFAULT_MIN_SIMILARITY = 0.6
BASE_CONFIDENCE = 0.5
EPISODE_MATCH_BONUS = 0.3
SUBTITLE_BONUS = 0.1
DUBBING_BONUS = 0.1


@dataclass(frozen=True)
class GroupingWeights:
    """Confidence weights for a group; informational only."""

    base: float = BASE_CONFIDENCE
    episode_match: float = EPISODE_MATCH_BONUS
    subtitles: float = SUBTITLE_BONUS
    dubs: float = DUBBING_BONUS


DEFAULT_WEIGHTS = GroupingWeights()

_EpisodeCache = Dict[str, Optional[EpisodeInfo]]


def _episode_of(file: ClassifiedFile, cache: _EpisodeCache) -> Optional[EpisodeInfo]:
    if file.path not in cache:
        cache[file.path] = extract_episode_info(file.name)
    return cache[file.path]


def _related(
    video: ClassifiedFile,
    other: ClassifiedFile,
    min_similarity: float,
    cache: _EpisodeCache,
) -> bool:
    video_episode = _episode_of(video, cache)
    other_episode = _episode_of(other, cache)
    if video_episode and other_episode and video_episode.episode == other_episode.episode:
        return True
    return similarity(video.name, other.name) >= min_similarity


def are_files_related(
    video: ClassifiedFile,
    other: ClassifiedFile,
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
) -> bool:
    """Check whether *other* belongs with *video*.

    Equal episode numbers always relate two files; otherwise the normalized
    names must be at least *min_similarity* alike.
    """
    return _related(video, other, min_similarity, {})


def find_related_files(
    video: ClassifiedFile,
    candidates: Iterable[ClassifiedFile],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
    exclude: Optional[Set[str]] = None,
    _cache: Optional[_EpisodeCache] = None,
) -> Tuple[List[ClassifiedFile], List[ClassifiedFile]]:
    """Find subtitles and dubs related to *video*.

    Args:
        video: The video to match against.
        candidates: Subtitle and dubbing files to consider.
        min_similarity: Similarity cutoff for the fuzzy fallback.
        exclude: Paths already attached elsewhere; they are skipped.

    Returns:
        Tuple of (subtitles, dubs), in candidate order.
    """
    cache = _cache if _cache is not None else {}
    exclude = exclude if exclude is not None else set()
    subtitles: List[ClassifiedFile] = []
    dubs: List[ClassifiedFile] = []
    for candidate in candidates:
        if candidate.path == video.path or candidate.path in exclude:
            continue
        if not _related(video, candidate, min_similarity, cache):
            continue
        if candidate.media_type is MediaType.SUBTITLE:
            subtitles.append(candidate)
        elif candidate.media_type is MediaType.DUBBING:
            dubs.append(candidate)
    return subtitles, dubs


def calculate_match_confidence(
    video: ClassifiedFile,
    subtitles: Sequence[ClassifiedFile],
    dubs: Sequence[ClassifiedFile],
    weights: GroupingWeights = DEFAULT_WEIGHTS,
    _cache: Optional[_EpisodeCache] = None,
) -> float:
    """Score how confident the grouping of *video* is, capped at 1.0."""
    cache = _cache if _cache is not None else {}
    score = weights.base
    video_episode = _episode_of(video, cache)
    if video_episode:
        for attached in (*subtitles, *dubs):
            info = _episode_of(attached, cache)
            if info and info.episode == video_episode.episode:
                score += weights.episode_match
                break
    if subtitles:
        score += weights.subtitles
    if dubs:
        score += weights.dubs
    return min(score, 1.0)


def generate_group_id(video_path: str, episode: Optional[int] = None) -> str:
    """Build a group id from an episode number or the video's filename."""
    if episode is not None:
        return f"ep-{episode}"
    name = re.split(r"[\\/]", video_path)[-1]
    return re.sub(r"[^a-zA-Z0-9]", "_", name)


def _sort_videos(
    videos: Sequence[ClassifiedFile], cache: _EpisodeCache
) -> List[ClassifiedFile]:
    def _compare(a: ClassifiedFile, b: ClassifiedFile) -> int:
        info_a, info_b = _episode_of(a, cache), _episode_of(b, cache)
        if info_a and info_b:
            return info_a.episode - info_b.episode
        return compare_names(a.name, b.name)

    return sorted(videos, key=cmp_to_key(_compare))


def group_files(
    files: Iterable[FileDescriptor],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
    weights: GroupingWeights = DEFAULT_WEIGHTS,
) -> List[FileGroup]:
    """Group a batch into video-centric FileGroups.

    Args:
        files: The batch, in listing order.
        min_similarity: Cutoff for the fuzzy fallback.
        weights: Confidence weights.

    Returns:
        One group per video, ordered by episode number (or natural name order
        when episode numbers are missing). A video with nothing attached still
        gets a group.
    """
    classified = classify_files(files)
    cache: _EpisodeCache = {}
    candidates = [*classified.subtitles, *classified.dubs]
    matched: Set[str] = set()

    groups: List[FileGroup] = []
    used_ids: Set[str] = set()
    for position, video in enumerate(_sort_videos(classified.videos, cache)):
        subtitles, dubs = find_related_files(
            video, candidates, min_similarity, exclude=matched, _cache=cache
        )
        matched.update(f.path for f in subtitles)
        matched.update(f.path for f in dubs)

        extracted = _episode_of(video, cache)
        episode_info = extracted or EpisodeInfo(
            episode=position + 1,
            raw_match=str(position + 1),
            pattern_type=PatternType.NUMBER,
        )
        group_id = generate_group_id(
            video.path, extracted.episode if extracted else None
        )
        if group_id in used_ids:
            suffix = 2
            while f"{group_id}-{suffix}" in used_ids:
                suffix += 1
            group_id = f"{group_id}-{suffix}"
        used_ids.add(group_id)

        groups.append(
            FileGroup(
                id=group_id,
                episode_info=episode_info,
                video_file=video,
                subtitle_files=subtitles,
                dubbing_files=dubs,
            )
        )

    # Second pass: episode number alone, first group in order wins.
    for leftover in candidates:
        if leftover.path in matched:
            continue
        leftover_episode = _episode_of(leftover, cache)
        if leftover_episode is None:
            continue
        for group in groups:
            video_episode = _episode_of(group.video_file, cache)
            if video_episode and video_episode.episode == leftover_episode.episode:
                if leftover.media_type is MediaType.SUBTITLE:
                    group.subtitle_files.append(leftover)
                else:
                    group.dubbing_files.append(leftover)
                matched.add(leftover.path)
                break

    for group in groups:
        group.confidence = calculate_match_confidence(
            group.video_file,
            group.subtitle_files,
            group.dubbing_files,
            weights,
            _cache=cache,
        )

    unmatched = len(candidates) - len(matched)
    logger.debug(
        "Grouped %d videos, %d attachments, %d unmatched",
        len(groups),
        len(matched),
        unmatched,
    )
    return groups
