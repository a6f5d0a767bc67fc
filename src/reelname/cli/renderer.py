"""Renderer for CLI output.

This module renders previews, groups and undo history as Rich tables.
- Conflicting rows are shown in bold red, changed rows in green and
  unchanged rows dimmed.
- A one-line summary follows every table.
"""

from typing import Mapping, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reelname.core.undo import format_relative_time
from reelname.models.history import RenameHistoryEntry
from reelname.models.plan import FileGroup, PreviewRow


def render_preview(rows: Sequence[PreviewRow], console: Console | None = None) -> None:
    """Render a flat-mode preview as a table.

    Args:
        rows: Preview rows in batch order.
        console: Optional Console instance to use for rendering.
    """
    console = console or Console()

    table = Table(title="Rename Preview")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Current name", style="cyan")
    table.add_column("New name", style="green")
    table.add_column("Status", style="bold")

    for index, row in enumerate(rows, start=1):
        if row.conflict:
            status, style = "conflict", "red bold"
        elif row.changed:
            status, style = "rename", "green"
        else:
            status, style = "unchanged", "dim"
        table.add_row(
            str(index), escape(row.old_name), escape(row.new_name or ""), status, style=style
        )

    console.print(table)
    changed = sum(1 for row in rows if row.changed)
    conflicts = sum(1 for row in rows if row.conflict)
    console.print(f"Total: {len(rows)} | Changed: {changed} | Conflicts: {conflicts}")


def render_groups(
    groups: Sequence[FileGroup],
    names: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> None:
    """Render series-mode groups, optionally with planned names.

    Args:
        groups: Groups in episode order.
        names: Optional map of file path to planned filename.
        console: Optional Console instance to use for rendering.
    """
    console = console or Console()
    names = names or {}

    table = Table(title="File Groups")
    table.add_column("Group", style="bold")
    table.add_column("Type")
    table.add_column("Current name", style="cyan")
    if names:
        table.add_column("New name", style="green")
    table.add_column("Confidence", justify="right")

    for group in groups:
        style = "red bold" if group.has_conflict else None
        for file in group.all_files():
            label = group.id if file is group.video_file else ""
            media = file.media_type.value
            if file.language:
                media = f"{media} ({file.language})"
            confidence = f"{group.confidence:.1f}" if file is group.video_file else ""
            cells = [label, media, escape(file.name)]
            if names:
                cells.append(escape(names.get(file.path, "")))
            cells.append(confidence)
            table.add_row(*cells, style=style)
        table.add_section()

    console.print(table)
    attached = sum(len(g.subtitle_files) + len(g.dubbing_files) for g in groups)
    conflicts = sum(1 for g in groups if g.has_conflict)
    console.print(f"Groups: {len(groups)} | Attached: {attached} | Conflicts: {conflicts}")


def render_history(
    entries: Sequence[RenameHistoryEntry], console: Console | None = None
) -> None:
    """Render the undo history, newest first."""
    console = console or Console()
    if not entries:
        console.print("[yellow]No rename history.[/yellow]")
        return

    table = Table(title="Undo History")
    table.add_column("When", style="cyan")
    table.add_column("Description")
    table.add_column("Files", justify="right")
    table.add_column("Folder", style="dim")
    for entry in entries:
        table.add_row(
            format_relative_time(entry.timestamp),
            escape(entry.description),
            str(len(entry.pairs)),
            escape(entry.folder),
        )
    console.print(table)
