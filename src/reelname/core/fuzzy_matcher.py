"""Filename similarity for reelname.

Uses rapidfuzz's Levenshtein distance on normalized filenames to decide whether
a subtitle or dub belongs to a video when episode numbers are not available.
"""

import re

from rapidfuzz.distance import Levenshtein

from reelname.core.classifier import get_base_name

_SEPARATORS_RE = re.compile(r"[._\-\s]+")
_TAG_PATTERNS = (
    re.compile(r"\[[^\]]*\]"),  # [tags]
    re.compile(r"\([^)]*\)"),  # (tags)
    re.compile(r"\d{3,4}p"),  # resolution
    re.compile(r"x\d{3,4}"),  # dimensions
    re.compile(r"(bluray|web.?dl|hdrip|dvdrip|webrip|hdtv)", re.IGNORECASE),
    re.compile(r"(aac|ac3|dts|x264|x265|hevc|h264|h265)", re.IGNORECASE),
    re.compile(r"\b(fa|en|ar|fr|de|es|it|pt|ru|tr)\b", re.IGNORECASE),
)


def _fold(value: str) -> str:
    return _SEPARATORS_RE.sub(" ", value.lower()).strip()


def normalize_for_comparison(filename: str) -> str:
    """Normalize a filename for fuzzy comparison.

    Drops the extension, case-folds, collapses separators, and strips bracketed
    tags, release tokens (resolution, source, codec) and language codes.
    """
    normalized = _fold(get_base_name(filename))
    for pattern in _TAG_PATTERNS:
        normalized = pattern.sub("", normalized)
    return re.sub(r"\s+", " ", normalized).strip()


def calculate_similarity(first: str, second: str) -> float:
    """Return ``1 - distance / max(len)`` for two case-folded strings.

    Identical strings score 1.0; an empty side scores 0.0.
    """
    a = _fold(first)
    b = _fold(second)
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def similarity(first: str, second: str) -> float:
    """Similarity of two filenames after normalization, in [0, 1]."""
    return calculate_similarity(
        normalize_for_comparison(first), normalize_for_comparison(second)
    )
