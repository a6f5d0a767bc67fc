"""Tests for reelname.core.planner."""

from typing import List

from reelname.core.grouper import group_files
from reelname.core.planner import (
    conflicting_targets,
    mark_group_conflicts,
    pairs_from_groups,
    pairs_from_preview,
    preview_group_targets,
)
from reelname.core.rules import build_preview
from reelname.models.core import FileDescriptor
from reelname.models.plan import FileGroup, RenamePair, SeriesMetadata
from reelname.models.rules import PrefixRule, SearchReplaceRule

TEMPLATE = "{series} - S{season}E{episode}"


def _groups(*names: str) -> List[FileGroup]:
    return group_files(
        [FileDescriptor.from_path(f"/tv/{n}") for n in names], min_similarity=0.95
    )


def test_pairs_from_preview_skips_conflicts_and_unchanged() -> None:
    files = [FileDescriptor.from_path(f"/d/{n}") for n in ("a.txt", "aa.txt", "b.txt")]
    rows = build_preview(files, [SearchReplaceRule(search="a", replace="")])
    assert pairs_from_preview(rows) == []

    rows = build_preview(files, [PrefixRule(value="x_")])
    assert [p.to_path for p in pairs_from_preview(rows)] == [
        "/d/x_a.txt",
        "/d/x_aa.txt",
        "/d/x_b.txt",
    ]


def test_preview_group_targets() -> None:
    groups = _groups("Show.S01E05.mkv", "Show.S01E05.Fa.srt")
    names = preview_group_targets(groups, TEMPLATE, SeriesMetadata(name="Show", season=1))
    assert names == {
        "/tv/Show.S01E05.mkv": "Show - S01E05.mkv",
        "/tv/Show.S01E05.Fa.srt": "Show - S01E05.Fa.srt",
    }


def test_mark_group_conflicts() -> None:
    groups = _groups("A.S01E05.mkv", "B.S02E05.mkv", "C.S01E06.mkv")
    metadata = SeriesMetadata(name="Show", season=1)
    names = preview_group_targets(groups, TEMPLATE, metadata)
    mark_group_conflicts(groups, names)
    assert [g.has_conflict for g in groups] == [True, True, False]


def test_pairs_from_groups() -> None:
    groups = _groups("A.S01E05.mkv", "B.S02E05.mkv", "C.S01E06.mkv", "C.S01E06.srt")
    names = preview_group_targets(groups, TEMPLATE, SeriesMetadata(name="Show", season=1))
    mark_group_conflicts(groups, names)
    pairs = pairs_from_groups(groups, names)
    assert pairs == [
        RenamePair(from_path="/tv/C.S01E06.mkv", to_path="/tv/Show - S01E06.mkv"),
        RenamePair(from_path="/tv/C.S01E06.srt", to_path="/tv/Show - S01E06.srt"),
    ]


def test_pairs_from_groups_skips_deselected_and_unchanged() -> None:
    groups = _groups("Show - S01E05.mkv", "Other.S01E06.mkv")
    names = preview_group_targets(groups, TEMPLATE, SeriesMetadata(name="Show", season=1))
    assert pairs_from_groups(groups, names) == [
        RenamePair(from_path="/tv/Other.S01E06.mkv", to_path="/tv/Show - S01E06.mkv")
    ]
    groups[1].selected = False
    assert pairs_from_groups(groups, names) == []


def test_conflicting_targets() -> None:
    pairs = [
        RenamePair(from_path="/d/a", to_path="/d/x"),
        RenamePair(from_path="/d/b", to_path="/d/x"),
        RenamePair(from_path="/d/c", to_path="/d/y"),
    ]
    assert conflicting_targets(pairs) == ["/d/x"]
