"""Tests for reelname.cli.renderer."""

from rich.console import Console

from reelname.cli.renderer import render_groups, render_history, render_preview
from reelname.core.grouper import group_files
from reelname.core.undo import create_history_entry
from reelname.models.core import FileDescriptor
from reelname.models.plan import PreviewRow, RenamePair


def _console() -> Console:
    return Console(record=True, width=120)


def test_render_preview_summary() -> None:
    console = _console()
    rows = [
        PreviewRow(
            path="/d/a.txt",
            old_name="a.txt",
            new_name="x.txt",
            new_path="/d/x.txt",
            changed=True,
        ),
        PreviewRow(path="/d/b.txt", old_name="b.txt"),
    ]
    render_preview(rows, console=console)
    text = console.export_text()
    assert "Rename Preview" in text
    assert "x.txt" in text
    assert "unchanged" in text
    assert "Total: 2 | Changed: 1 | Conflicts: 0" in text


def test_render_groups_with_names() -> None:
    console = _console()
    groups = group_files(
        [
            FileDescriptor.from_path("/tv/Show.S01E05.mkv"),
            FileDescriptor.from_path("/tv/Show.S01E05.Fa.srt"),
        ]
    )
    names = {"/tv/Show.S01E05.mkv": "Show - S01E05.mkv"}
    render_groups(groups, names, console=console)
    text = console.export_text()
    assert "ep-5" in text
    assert "subtitle (Fa)" in text
    assert "Show - S01E05.mkv" in text
    assert "Groups: 1 | Attached: 1 | Conflicts: 0" in text


def test_render_history() -> None:
    console = _console()
    entry = create_history_entry(
        [RenamePair(from_path="/d/a", to_path="/d/b")], "/d", "Renamed 1 file(s)"
    )
    render_history([entry], console=console)
    text = console.export_text()
    assert "Renamed 1 file(s)" in text
    assert "just now" in text


def test_render_history_empty() -> None:
    console = _console()
    render_history([], console=console)
    assert "No rename history" in console.export_text()
