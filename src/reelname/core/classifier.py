"""File classification for media batches.

This module maps files to a MediaType (video, subtitle, dubbing, other) by
extension and, for subtitles, extracts a language tag from the filename.
- Extension sets are fixed; matching is case-insensitive.
- Every string classifies to exactly one type, including empty extensions.
"""

import re
from typing import Iterable, Optional

from reelname.models.core import (
    ClassificationResult,
    ClassifiedFile,
    FileDescriptor,
    MediaType,
)

VIDEO_EXTENSIONS = frozenset(
    {
        "mp4",
        "mkv",
        "avi",
        "mov",
        "wmv",
        "flv",
        "webm",
        "m4v",
        "mpg",
        "mpeg",
        "m2v",
        "ts",
        "mts",
    }
)

SUBTITLE_EXTENSIONS = frozenset({"srt", "ass", "ssa", "vtt", "sub", "idx", "pgs"})

DUBBING_EXTENSIONS = frozenset({"mka", "ac3", "dts", "aac", "eac3", "dts-hd"})

# Language tags must sit between dots (or end the base name) so that words
# such as "Fantastic" do not register as "Fa".
SHORT_LANGUAGE_RE = re.compile(
    r"\.\s*(Fa|En|Ar|Fr|De|Es|It|Pt|Ru|Tr|Ja|Ko|Zh)\s*(?=\.|$)",
    re.IGNORECASE,
)
FULL_LANGUAGE_RE = re.compile(
    r"\.(English|Persian|Arabic|French|German|Spanish|Italian|Portuguese|"
    r"Russian|Turkish|Japanese|Korean|Chinese)(?=\.|$)",
    re.IGNORECASE,
)


def get_extension(filename: str) -> str:
    """Return the lower-case extension of *filename* without the dot.

    A name whose only dot is its first character (``.gitignore``) has no
    extension.
    """
    dot = filename.rfind(".")
    if dot <= 0:
        return ""
    return filename[dot + 1 :].lower()


def get_base_name(filename: str) -> str:
    """Return *filename* without its final extension."""
    dot = filename.rfind(".")
    if dot <= 0:
        return filename
    return filename[:dot]


def get_media_type(extension: str) -> MediaType:
    """Classify an extension (with or without leading dot).

    Args:
        extension: File extension such as ``mkv`` or ``.SRT``.

    Returns:
        The matching MediaType, ``OTHER`` when none of the sets match.
    """
    ext = extension.lstrip(".").lower()
    if ext in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    if ext in SUBTITLE_EXTENSIONS:
        return MediaType.SUBTITLE
    if ext in DUBBING_EXTENSIONS:
        return MediaType.DUBBING
    return MediaType.OTHER


def media_type_for_name(filename: str) -> MediaType:
    """Classify a bare filename by its extension."""
    return get_media_type(get_extension(filename))


def is_video(filename: str) -> bool:
    return media_type_for_name(filename) is MediaType.VIDEO


def is_subtitle(filename: str) -> bool:
    return media_type_for_name(filename) is MediaType.SUBTITLE


def is_dubbing(filename: str) -> bool:
    return media_type_for_name(filename) is MediaType.DUBBING


def extract_language(filename: str) -> Optional[str]:
    """Extract a language tag from a subtitle filename.

    The short-code pass runs first, then the full-name pass. The tag is
    returned as written in the filename.

    Examples:
        ``movie.Fa.srt`` -> ``Fa``; ``movie.English.ass`` -> ``English``.
    """
    base = get_base_name(filename)
    match = SHORT_LANGUAGE_RE.search(base)
    if match:
        return match.group(1)
    match = FULL_LANGUAGE_RE.search(base)
    if match:
        return match.group(1)
    return None


def classify_file(file: FileDescriptor) -> ClassifiedFile:
    """Attach a media type (and a language for subtitles) to *file*."""
    media_type = get_media_type(file.extension)
    language = extract_language(file.name) if media_type is MediaType.SUBTITLE else None
    return ClassifiedFile(
        path=file.path,
        name=file.name,
        extension=file.extension,
        media_type=media_type,
        language=language,
    )


def classify_files(files: Iterable[FileDescriptor]) -> ClassificationResult:
    """Classify a batch and partition it by media type, keeping input order."""
    result = ClassificationResult()
    buckets = {
        MediaType.VIDEO: result.videos,
        MediaType.SUBTITLE: result.subtitles,
        MediaType.DUBBING: result.dubs,
        MediaType.OTHER: result.others,
    }
    for file in files:
        classified = classify_file(file)
        buckets[classified.media_type].append(classified)
    return result
