"""Tests for reelname.core.grouper.

Covers:
- Video-centric grouping with subtitle/dub attachment
- Deterministic group order and id generation
- Single attachment of each subtitle/dub across the batch
- Confidence scoring
"""

from typing import List

import pytest

from reelname.core.grouper import (
    GroupingWeights,
    are_files_related,
    calculate_match_confidence,
    find_related_files,
    generate_group_id,
    group_files,
)
from reelname.core.classifier import classify_file
from reelname.models.core import ClassifiedFile, FileDescriptor, MediaType, PatternType


def _files(*names: str) -> List[FileDescriptor]:
    return [FileDescriptor.from_path(f"/tv/{name}") for name in names]


def _classified(name: str) -> ClassifiedFile:
    return classify_file(FileDescriptor.from_path(f"/tv/{name}"))


def test_subtitle_attaches_to_video() -> None:
    groups = group_files(_files("Show.S01E05.mkv", "Show.S01E05.Fa.srt"))
    assert len(groups) == 1
    group = groups[0]
    assert group.id == "ep-5"
    assert group.video_file.name == "Show.S01E05.mkv"
    assert [s.name for s in group.subtitle_files] == ["Show.S01E05.Fa.srt"]
    assert group.subtitle_files[0].language == "Fa"
    assert group.confidence == pytest.approx(0.9)


def test_each_episode_gets_its_own_files() -> None:
    files = _files(
        "Show.S01E02.mkv",
        "Show.S01E01.mkv",
        "Show.S01E01.Fa.srt",
        "Show.S01E02.Fa.srt",
        "Show.S01E02.mka",
    )
    groups = group_files(files, min_similarity=0.95)
    assert [g.id for g in groups] == ["ep-1", "ep-2"]
    assert [s.name for s in groups[0].subtitle_files] == ["Show.S01E01.Fa.srt"]
    assert groups[0].dubbing_files == []
    assert [s.name for s in groups[1].subtitle_files] == ["Show.S01E02.Fa.srt"]
    assert [d.name for d in groups[1].dubbing_files] == ["Show.S01E02.mka"]
    assert groups[1].confidence == pytest.approx(1.0)


def test_video_without_related_files_still_grouped() -> None:
    groups = group_files(_files("Holiday Video.mkv", "notes.txt"))
    assert len(groups) == 1
    group = groups[0]
    assert group.id == "Holiday_Video_mkv"
    assert group.subtitle_files == []
    assert group.dubbing_files == []
    assert group.other_files == []
    assert group.episode_info.pattern_type is PatternType.NUMBER
    assert group.episode_info.episode == 1
    assert group.confidence == pytest.approx(0.5)


def test_no_videos_no_groups() -> None:
    assert group_files(_files("a.srt", "b.mka")) == []


def test_attachment_is_global() -> None:
    files = _files("Show.S01E05.mkv", "Show.S02E05.mkv", "Show.S01E05.srt")
    groups = group_files(files)
    attached = [s.path for g in groups for s in g.subtitle_files]
    assert attached == ["/tv/Show.S01E05.srt"]
    assert groups[0].video_file.name == "Show.S01E05.mkv"


def test_duplicate_group_ids_get_suffix() -> None:
    groups = group_files(_files("Show.S01E05.mkv", "Show.S02E05.mkv"))
    assert [g.id for g in groups] == ["ep-5", "ep-5-2"]


def test_videos_without_episodes_sorted_naturally() -> None:
    groups = group_files(_files("clip10.mkv", "clip2.mkv"))
    assert [g.video_file.name for g in groups] == ["clip2.mkv", "clip10.mkv"]


def test_fuzzy_fallback_attaches_similar_names() -> None:
    groups = group_files(_files("Holiday Video.mkv", "Holiday Video.en.srt"))
    assert [s.name for s in groups[0].subtitle_files] == ["Holiday Video.en.srt"]
    assert groups[0].confidence == pytest.approx(0.6)


def test_grouping_is_deterministic() -> None:
    files = _files("Show.S01E02.mkv", "Show.S01E01.mkv", "Show.S01E01.srt")
    assert group_files(files) == group_files(files)


def test_are_files_related_by_episode() -> None:
    video = _classified("Alpha.S01E03.mkv")
    sub = _classified("Totally.Different.Name.E03.srt")
    assert are_files_related(video, sub, min_similarity=0.99)


def test_find_related_files_respects_exclude() -> None:
    video = _classified("Show.S01E05.mkv")
    sub = _classified("Show.S01E05.srt")
    dub = _classified("Show.S01E05.ac3")
    subs, dubs = find_related_files(video, [sub, dub], exclude={sub.path})
    assert subs == []
    assert dubs == [dub]


def test_calculate_match_confidence_custom_weights() -> None:
    video = _classified("Show.S01E05.mkv")
    sub = _classified("Show.S01E05.srt")
    weights = GroupingWeights(base=0.2, episode_match=0.1, subtitles=0.05, dubs=0.05)
    assert calculate_match_confidence(video, [sub], [], weights) == pytest.approx(0.35)
    assert sub.media_type is MediaType.SUBTITLE


def test_confidence_is_capped() -> None:
    video = _classified("Show.S01E05.mkv")
    sub = _classified("Show.S01E05.srt")
    weights = GroupingWeights(base=0.9, episode_match=0.5)
    assert calculate_match_confidence(video, [sub], [], weights) == 1.0


def test_generate_group_id() -> None:
    assert generate_group_id("/tv/Show.S01E05.mkv", 5) == "ep-5"
    assert generate_group_id("C:\\tv\\My Show!.mkv") == "My_Show__mkv"
