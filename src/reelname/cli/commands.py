"""CLI commands for reelname.

This module implements all user-facing CLI commands: flat-mode preview and
apply, series-mode grouping, undo, history and configuration.
- Uses Typer for declarative CLI structure and option parsing.
- All output is routed through Rich Console for consistent, styled UX.
- The planning engine (reelname.core) stays pure; this module wires it to the
  local filesystem service and the persisted undo ledger.

Design:
- Annotated aliases define shared arguments/options once.
- Exit codes are defined as an Enum for clarity and maintainability.
"""

import json
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.markup import escape
from rich.traceback import install as install_traceback

from reelname.cli import console
from reelname.cli.renderer import render_groups, render_history, render_preview
from reelname.core.grouper import group_files
from reelname.core.patterns import (
    PREDEFINED_PATTERNS,
    detect_metadata_from_groups,
    get_pattern_by_id,
    validate_template,
)
from reelname.core.planner import (
    mark_group_conflicts,
    pairs_from_groups,
    pairs_from_preview,
    preview_group_targets,
)
from reelname.core.rules import build_preview, rules_from_options
from reelname.core.undo import UndoLedger
from reelname.fs.service import LocalFileService
from reelname.fs.storage import JsonFileHistoryStore
from reelname.models.core import FileDescriptor
from reelname.models.plan import RenamePair, SeriesMetadata
from reelname.models.rules import RenameOptions, SeriesOptions
from reelname.utils.config import (
    get_default_pattern_id,
    get_min_similarity,
    grouping_weights_from_config,
    history_capacity_from_config,
    resolve_setting,
    set_setting,
)
from reelname.utils.debug import setup_logger

# Install rich traceback handler
install_traceback(show_locals=False)

app = typer.Typer(
    name="reelname",
    help="Plan, apply and undo batch renames of series video, subtitle and dub files.",
    add_completion=True,
)
config_app = typer.Typer(help="Read and write persistent settings.")
app.add_typer(config_app, name="config")


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    CONFLICT = 2


FOLDER = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
        resolve_path=True,
        help="Folder whose files should be renamed",
    ),
]
SEARCH = Annotated[str, typer.Option("--search", "-s", help="Literal text to find")]
REPLACE = Annotated[str, typer.Option("--replace", "-r", help="Replacement text")]
PREFIX = Annotated[str, typer.Option("--prefix", help="Text to prepend")]
SUFFIX = Annotated[str, typer.Option("--suffix", help="Text to append")]
NUMBERING = Annotated[
    bool, typer.Option("--numbering", help="Append _N (1-based batch index)")
]
NUMBER_WIDTH = Annotated[
    int, typer.Option("--number-width", min=1, help="Zero-pad numbering to this width")
]
NEW_NAME = Annotated[
    Optional[str], typer.Option("--new-name", help="Replace the whole base name")
]
DROP_EXTENSION = Annotated[
    bool,
    typer.Option("--drop-extension", help="With --new-name, drop the original extension"),
]
SERIES_NAME = Annotated[
    Optional[str],
    typer.Option("--series-name", help="Enable the series rule with this series name"),
]
SEASON_NUMBER = Annotated[int, typer.Option("--season-number", min=0, help="Season")]
START_EPISODE = Annotated[
    int, typer.Option("--start-episode", min=0, help="First episode number")
]
NO_SEASON = Annotated[
    bool, typer.Option("--no-season", help="Omit the season part in series names")
]
EXISTING_NUMBERS = Annotated[
    bool,
    typer.Option(
        "--existing-numbers", help="Reuse episode numbers found in the filenames"
    ),
]
LONG_PREFIXES = Annotated[
    bool,
    typer.Option("--long-prefixes", help="Use 'Season 1 Episode 5' instead of S01 E05"),
]
JSON_OUTPUT = Annotated[bool, typer.Option("--json", help="Output results in JSON format")]
YES = Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")]
MIN_SIMILARITY = Annotated[
    Optional[float],
    typer.Option(
        "--min-similarity",
        min=0.0,
        max=1.0,
        help="Similarity cutoff for attaching subtitles/dubs by name",
    ),
]


@app.callback()
def callback() -> None:
    """Configure logging before any command runs."""
    setup_logger()


def _list_files(folder: Path) -> List[FileDescriptor]:
    return LocalFileService().list_files(str(folder))


def _open_ledger() -> UndoLedger:
    ledger = UndoLedger(JsonFileHistoryStore(), capacity=history_capacity_from_config())
    ledger.load()
    return ledger


def _build_options(  # noqa: PLR0913
    search: str,
    replace: str,
    prefix: str,
    suffix: str,
    numbering: bool,
    number_width: int,
    new_name: Optional[str],
    drop_extension: bool,
    series_name: Optional[str],
    season_number: int,
    start_episode: int,
    no_season: bool,
    existing_numbers: bool,
    long_prefixes: bool,
) -> RenameOptions:
    series = None
    if series_name is not None:
        series = SeriesOptions(
            enabled=True,
            series_name=series_name,
            include_season=not no_season,
            season_number=season_number,
            start_episode=start_episode,
            season_prefix="Season" if long_prefixes else "S",
            episode_prefix="Episode" if long_prefixes else "E",
            use_existing_episode_numbers=existing_numbers,
        )
    return RenameOptions(
        search=search,
        replace=replace,
        prefix=prefix,
        suffix=suffix,
        numbering=numbering,
        number_width=number_width,
        new_name=new_name,
        keep_extension=not drop_extension,
        series=series,
    )


def _apply_and_record(pairs: List[RenamePair], folder: Path, yes: bool) -> None:
    """Apply *pairs* through the local service and record them for undo."""
    if not pairs:
        console.print("[yellow]No changes to apply.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)
    if not yes and not typer.confirm(f"Rename {len(pairs)} file(s)?"):
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    result = LocalFileService().apply_renames(pairs)
    if not result.success:
        console.print(f"[red]Error: {escape(result.error or 'Rename failed')}[/red]")
        raise typer.Exit(ExitCode.ERROR)

    ledger = _open_ledger()
    ledger.record(pairs, str(folder), f"Renamed {len(pairs)} file(s)")
    console.print(f"[green]Renamed {len(pairs)} file(s).[/green]")


@app.command()
def preview(  # noqa: PLR0913
    folder: FOLDER,
    search: SEARCH = "",
    replace: REPLACE = "",
    prefix: PREFIX = "",
    suffix: SUFFIX = "",
    numbering: NUMBERING = False,
    number_width: NUMBER_WIDTH = 1,
    new_name: NEW_NAME = None,
    drop_extension: DROP_EXTENSION = False,
    series_name: SERIES_NAME = None,
    season_number: SEASON_NUMBER = 1,
    start_episode: START_EPISODE = 1,
    no_season: NO_SEASON = False,
    existing_numbers: EXISTING_NUMBERS = False,
    long_prefixes: LONG_PREFIXES = False,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Preview flat-mode renames for every file in FOLDER."""
    options = _build_options(
        search, replace, prefix, suffix, numbering, number_width, new_name,
        drop_extension, series_name, season_number, start_episode, no_season,
        existing_numbers, long_prefixes,
    )  # fmt: skip
    rows = build_preview(_list_files(folder), rules_from_options(options))
    if json_output:
        sys.stdout.write(json.dumps([row.model_dump() for row in rows], indent=2) + "\n")
    else:
        render_preview(rows, console=console)
    if any(row.conflict for row in rows):
        raise typer.Exit(ExitCode.CONFLICT)


@app.command()
def apply(  # noqa: PLR0913
    folder: FOLDER,
    search: SEARCH = "",
    replace: REPLACE = "",
    prefix: PREFIX = "",
    suffix: SUFFIX = "",
    numbering: NUMBERING = False,
    number_width: NUMBER_WIDTH = 1,
    new_name: NEW_NAME = None,
    drop_extension: DROP_EXTENSION = False,
    series_name: SERIES_NAME = None,
    season_number: SEASON_NUMBER = 1,
    start_episode: START_EPISODE = 1,
    no_season: NO_SEASON = False,
    existing_numbers: EXISTING_NUMBERS = False,
    long_prefixes: LONG_PREFIXES = False,
    yes: YES = False,
) -> None:
    """Apply flat-mode renames in FOLDER; conflicting rows are skipped."""
    options = _build_options(
        search, replace, prefix, suffix, numbering, number_width, new_name,
        drop_extension, series_name, season_number, start_episode, no_season,
        existing_numbers, long_prefixes,
    )  # fmt: skip
    rows = build_preview(_list_files(folder), rules_from_options(options))
    render_preview(rows, console=console)
    skipped = sum(1 for row in rows if row.conflict)
    if skipped:
        console.print(f"[yellow]Skipping {skipped} conflicting file(s).[/yellow]")
    _apply_and_record(pairs_from_preview(rows), folder, yes)


@app.command()
def group(
    folder: FOLDER,
    min_similarity: MIN_SIMILARITY = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Group videos in FOLDER with their subtitles and dubs."""
    groups = group_files(
        _list_files(folder),
        min_similarity=get_min_similarity(min_similarity),
        weights=grouping_weights_from_config(),
    )
    if json_output:
        sys.stdout.write(
            json.dumps([g.model_dump(mode="json") for g in groups], indent=2) + "\n"
        )
        return
    if not groups:
        console.print("[yellow]No video files found.[/yellow]")
        return
    render_groups(groups, console=console)


@app.command()
def series(  # noqa: PLR0913
    folder: FOLDER,
    name: Annotated[
        Optional[str], typer.Option("--name", "-n", help="Series name (detected if omitted)")
    ] = None,
    season: Annotated[
        Optional[int], typer.Option("--season", min=0, help="Season number")
    ] = None,
    pattern: Annotated[
        Optional[str],
        typer.Option(
            "--pattern",
            "-p",
            help="Predefined pattern id: "
            + ", ".join(p.id for p in PREDEFINED_PATTERNS),
        ),
    ] = None,
    template: Annotated[
        Optional[str], typer.Option("--template", "-t", help="Custom naming template")
    ] = None,
    min_similarity: MIN_SIMILARITY = None,
    do_apply: Annotated[bool, typer.Option("--apply", help="Apply the renames")] = False,
    yes: YES = False,
) -> None:
    """Rename grouped series files in FOLDER using a naming template."""
    if template is not None:
        error = validate_template(template)
        if error:
            console.print(f"[red]Error: {error}[/red]")
            raise typer.Exit(ExitCode.ERROR)
        active_template = template
    else:
        pattern_id = get_default_pattern_id(pattern)
        found = get_pattern_by_id(pattern_id)
        if found is None:
            console.print(f"[red]Error: Unknown pattern: {escape(pattern_id)}[/red]")
            raise typer.Exit(ExitCode.ERROR)
        active_template = found.template

    groups = group_files(
        _list_files(folder),
        min_similarity=get_min_similarity(min_similarity),
        weights=grouping_weights_from_config(),
    )
    if not groups:
        console.print("[yellow]No video files found.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    detected = detect_metadata_from_groups(groups)
    metadata = SeriesMetadata(
        name=name if name is not None else str(detected.get("name", "")),
        season=season if season is not None else detected.get("season", 1),
        pattern=active_template,
    )
    names = preview_group_targets(groups, active_template, metadata)
    mark_group_conflicts(groups, names)
    render_groups(groups, names, console=console)

    if not do_apply:
        if any(g.has_conflict for g in groups):
            raise typer.Exit(ExitCode.CONFLICT)
        return
    _apply_and_record(pairs_from_groups(groups, names), folder, yes)


@app.command()
def undo(yes: YES = False) -> None:
    """Undo the most recent applied rename batch."""
    ledger = _open_ledger()
    entry = ledger.peek()
    if entry is None:
        console.print("[yellow]Nothing to undo.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)
    if not yes and not typer.confirm(f"Undo '{entry.description}' ({len(entry.pairs)} file(s))?"):
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    result = ledger.undo(LocalFileService())
    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    console.print(f"[green]Restored {result.restored_count} file(s).[/green]")


@app.command()
def history() -> None:
    """Show recorded rename batches, newest first."""
    render_history(_open_ledger().entries(), console=console)


@config_app.command("get")
def config_get(key: Annotated[str, typer.Argument(help="Dotted key, e.g. history.capacity")]) -> None:
    """Print the resolved value of KEY."""
    value = resolve_setting(key, default=None)
    console.print("" if value is None else str(value))


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. history.capacity")],
    value: Annotated[str, typer.Argument(help="Value to store")],
) -> None:
    """Store VALUE under KEY in the config file."""
    parsed: object = value
    if value.lower() in {"true", "false"}:
        parsed = value.lower() == "true"
    else:
        try:
            parsed = int(value)
        except ValueError:
            try:
                parsed = float(value)
            except ValueError:
                parsed = value
    set_setting(key, parsed)
    console.print(f"Set [bold]{key}[/bold] = {parsed!r}")


@app.command()
def version() -> None:
    """Show the version of reelname."""
    from reelname.__about__ import __version__

    console.print(f"reelname version: [bold]{__version__}[/bold]")


def main() -> None:
    """Main entry point for the CLI."""
    app()
