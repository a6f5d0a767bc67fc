"""Tests for reelname.core.fuzzy_matcher."""

import pytest

from reelname.core.fuzzy_matcher import (
    calculate_similarity,
    normalize_for_comparison,
    similarity,
)


def test_normalize_strips_release_tags() -> None:
    assert (
        normalize_for_comparison("Show.S01E05.[Group].1080p.WEB-DL.x264.mkv")
        == "show s01e05"
    )


def test_normalize_strips_language_codes() -> None:
    assert normalize_for_comparison("Show.S01E05.Fa.srt") == "show s01e05"


def test_identical_strings_score_one() -> None:
    assert calculate_similarity("abc", "abc") == 1.0


def test_case_is_ignored() -> None:
    assert calculate_similarity("ABC", "abc") == 1.0


def test_empty_side_scores_zero() -> None:
    assert calculate_similarity("", "abc") == 0.0
    assert calculate_similarity("abc", "") == 0.0


def test_levenshtein_ratio() -> None:
    assert calculate_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)


def test_similarity_is_symmetric() -> None:
    a, b = "Show.S01E05.mkv", "Other.Show.E5.srt"
    assert similarity(a, b) == similarity(b, a)


def test_similarity_bounds() -> None:
    score = similarity("Show.S01E05.mkv", "Completely Different.srt")
    assert 0.0 <= score <= 1.0


def test_subtitle_matches_video() -> None:
    assert similarity("Show.S01E05.mkv", "Show.S01E05.Fa.srt") == 1.0
