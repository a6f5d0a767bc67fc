"""Season/episode extraction from filenames.

The extractor walks an ordered cascade of EpisodePattern strategies and stops
at the first one that yields an episode number in (0, 1000). An out-of-range
number does not stop the cascade; the next pattern is tried.

Auxiliary helpers detect a series name and a consensus season for a batch,
and sort files by episode.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, TypeVar

from reelname.core.classifier import get_base_name
from reelname.models.core import EpisodeInfo, PatternType

logger = logging.getLogger(__name__)

MAX_EPISODE = 1000  # exclusive upper bound for accepted episode numbers

T = TypeVar("T")


@dataclass(frozen=True)
class EpisodePattern:
    """One step of the extraction cascade."""

    name: str
    regex: re.Pattern[str]
    episode_group: int
    pattern_type: PatternType
    season_group: Optional[int] = None

    def match(self, base_name: str) -> Optional[EpisodeInfo]:
        """Apply this pattern to an extension-less name.

        Returns:
            EpisodeInfo when the pattern matches with an episode in range,
            otherwise None.
        """
        found = self.regex.search(base_name)
        if not found:
            return None
        episode = int(found.group(self.episode_group))
        if not 0 < episode < MAX_EPISODE:
            return None
        season = (
            int(found.group(self.season_group))
            if self.season_group is not None
            else None
        )
        return EpisodeInfo(
            season=season,
            episode=episode,
            raw_match=found.group(0),
            pattern_type=self.pattern_type,
        )


EPISODE_PATTERNS: tuple[EpisodePattern, ...] = (
    # S01E05, s1e5
    EpisodePattern(
        "sxe",
        re.compile(r"[Ss](\d{1,2})[Ee](\d{1,3})"),
        episode_group=2,
        season_group=1,
        pattern_type=PatternType.SXE,
    ),
    # 1x05, 01X5
    EpisodePattern(
        "xsep",
        re.compile(r"(\d{1,2})[xX](\d{1,3})"),
        episode_group=2,
        season_group=1,
        pattern_type=PatternType.XSEP,
    ),
    # Episode 5, Ep 5, Ep.5
    EpisodePattern(
        "episode",
        re.compile(r"[Ee]p?(?:isode)?[\s.]*(\d{1,3})"),
        episode_group=1,
        pattern_type=PatternType.EPISODE,
    ),
    # E05
    EpisodePattern(
        "bare_e",
        re.compile(r"\b[Ee](\d{1,3})\b"),
        episode_group=1,
        pattern_type=PatternType.EPISODE,
    ),
    # Season 1 ... Episode 5
    EpisodePattern(
        "season_episode",
        re.compile(r"[Ss]eason\s*(\d{1,2}).*?[Ee]p(?:isode)?\s*(\d{1,3})"),
        episode_group=2,
        season_group=1,
        pattern_type=PatternType.SXE,
    ),
    # Part 5, Pt 5
    EpisodePattern(
        "part",
        re.compile(r"[Pp](?:art|t)[\s.]*(\d{1,3})"),
        episode_group=1,
        pattern_type=PatternType.EPISODE,
    ),
    # Chapter 5
    EpisodePattern(
        "chapter",
        re.compile(r"[Cc]hapter[\s.]*(\d{1,3})"),
        episode_group=1,
        pattern_type=PatternType.EPISODE,
    ),
)


def extract_episode_info(
    filename: str,
    patterns: Sequence[EpisodePattern] = EPISODE_PATTERNS,
) -> Optional[EpisodeInfo]:
    """Extract season/episode information from *filename*.

    Args:
        filename: File name, with or without extension.
        patterns: Cascade to evaluate, in order.

    Returns:
        The first accepted EpisodeInfo, or None when no pattern succeeds.
    """
    base_name = get_base_name(filename)
    for pattern in patterns:
        info = pattern.match(base_name)
        if info is not None:
            logger.debug("%s matched %r via %s", filename, info.raw_match, pattern.name)
            return info
    return None


def extract_episode_info_with_fallback(filename: str, position: int) -> EpisodeInfo:
    """Extract episode info, falling back to the 1-based batch position."""
    info = extract_episode_info(filename)
    if info is not None:
        return info
    return EpisodeInfo(
        episode=position + 1,
        raw_match=str(position + 1),
        pattern_type=PatternType.NUMBER,
    )


def pad_episode(episode: int, width: int = 2) -> str:
    return str(episode).zfill(width)


def format_sxe(season: Optional[int], episode: int) -> str:
    """Format as ``S01E05``, or ``E05`` without a season."""
    if season is None:
        return f"E{pad_episode(episode)}"
    return f"S{pad_episode(season)}E{pad_episode(episode)}"


def format_xsep(season: Optional[int], episode: int) -> str:
    """Format as ``1x05``, or ``05`` without a season."""
    if season is None:
        return pad_episode(episode)
    return f"{season}x{pad_episode(episode)}"


_SINGLE_NAME_STRIP = (
    re.compile(r"[Ss]\d{1,2}[Ee]\d{1,3}"),
    re.compile(r"\d{1,2}[xX]\d{1,3}"),
    re.compile(r"[Ee]p?(?:isode)?[\s.]*\d{1,3}"),
    re.compile(r"\d{4}p"),
    re.compile(r"\d{3,4}x\d{3,4}"),
)


def detect_series_name(filenames: Sequence[str]) -> Optional[str]:
    """Guess the series name shared by *filenames*.

    A single file has its episode tokens, resolution and bracket tags removed.
    Several files use their case-insensitive common prefix. Separators
    (``._-``) become spaces in both cases.
    """
    if not filenames:
        return None

    if len(filenames) == 1:
        cleaned = get_base_name(filenames[0])
        for pattern in _SINGLE_NAME_STRIP:
            cleaned = pattern.sub("", cleaned, count=1)
        cleaned = re.sub(r"\[[^\]]+\]", "", cleaned)
        cleaned = re.sub(r"\([^)]+\)", "", cleaned)
        cleaned = re.sub(r"[._-]+", " ", cleaned).strip()
        return cleaned or None

    base_names = [get_base_name(name) for name in filenames]
    prefix = base_names[0]
    for other in base_names[1:]:
        while prefix and not other.lower().startswith(prefix.lower()):
            prefix = prefix[:-1]
        if not prefix:
            break

    cleaned = re.sub(r"[._-]+$", "", prefix)
    cleaned = re.sub(r"[._-]", " ", cleaned).strip()
    return cleaned or None


def detect_season(filenames: Sequence[str], default: int = 1) -> int:
    """Return the most common extracted season, or *default* when none.

    Ties go to the season seen first.
    """
    seasons = Counter()
    for name in filenames:
        info = extract_episode_info(name)
        if info is not None and info.season is not None:
            seasons[info.season] += 1
    if not seasons:
        return default
    return seasons.most_common(1)[0][0]


def natural_key(name: str) -> tuple:
    """Case-insensitive sort key that compares digit runs numerically."""
    return tuple(
        (0, int(part), part) if part.isdigit() else (1, part.casefold(), part)
        for part in re.split(r"(\d+)", name)
        if part
    )


def compare_names(a: str, b: str) -> int:
    key_a, key_b = natural_key(a), natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_files_by_episode(
    items: Sequence[T], name_of: Callable[[T], str] = lambda item: item.name
) -> List[T]:
    """Sort items by season then episode; items without info go last by name."""
    infos = {id(item): extract_episode_info(name_of(item)) for item in items}

    def _compare(a: T, b: T) -> int:
        info_a, info_b = infos[id(a)], infos[id(b)]
        if info_a and info_b:
            if (
                info_a.season is not None
                and info_b.season is not None
                and info_a.season != info_b.season
            ):
                return info_a.season - info_b.season
            return info_a.episode - info_b.episode
        if info_a and not info_b:
            return -1
        if info_b and not info_a:
            return 1
        return compare_names(name_of(a), name_of(b))

    return sorted(items, key=cmp_to_key(_compare))
