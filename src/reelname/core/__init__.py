"""Rename planning engine for reelname.

This package exposes the pure planning API consumed by the CLI and other
hosts:
- group_files: build video-centric groups with attached subtitles and dubs.
- build_preview: run a rule pipeline over a flat batch and flag collisions.
- extract_episode_info: season/episode extraction cascade.
- UndoLedger: bounded history of applied batches.

Nothing in this package touches the filesystem; see reelname.fs for the
collaborators that do.
"""

from reelname.core.classifier import classify_file, classify_files
from reelname.core.episode_parser import (
    extract_episode_info,
    extract_episode_info_with_fallback,
)
from reelname.core.fuzzy_matcher import similarity
from reelname.core.grouper import group_files
from reelname.core.patterns import build_filename, validate_template
from reelname.core.rules import build_preview, rules_from_options
from reelname.core.undo import UndoLedger

__all__ = [
    "UndoLedger",
    "build_filename",
    "build_preview",
    "classify_file",
    "classify_files",
    "extract_episode_info",
    "extract_episode_info_with_fallback",
    "group_files",
    "rules_from_options",
    "similarity",
    "validate_template",
]
