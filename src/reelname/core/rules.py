"""Rule engine and preview builder for flat-mode renames.

Each file's base name (the name minus its final extension) runs through the
rule pipeline in the fixed order rename -> search-replace -> prefix -> suffix
-> numbering -> series, whatever order the rules were given in. The result is
one PreviewRow per input file, followed by a collision pass that flags every
row whose target path is shared with another file of the batch.

The engine is pure: identical inputs always yield identical rows, including
conflict flags.
"""

import logging
import re
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from reelname.models.core import FileDescriptor
from reelname.models.plan import PreviewRow
from reelname.models.rules import (
    RULE_ORDER,
    NumberingRule,
    PrefixRule,
    RenameOptions,
    RenameRule,
    RenameRuleSpec,
    SearchReplaceRule,
    SeriesRule,
    SuffixRule,
)

logger = logging.getLogger(__name__)

# Episode-number cascade used by the series rule. It is more permissive than
# the grouping cascade because it only needs a number, not a season.
EPISODE_NUMBER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:episode|ep|e)[\s._-]+(\d{1,3})", re.IGNORECASE),
    re.compile(r"\d+x(\d{1,3})(?:\s|$|[^\d])", re.IGNORECASE),
    re.compile(r"s\d+[e\s](\d{1,3})(?:\s|$|[^\d])", re.IGNORECASE),
    re.compile(r"[\[{(](\d{1,3})[\]})]"),
    re.compile(r"[\s._-](\d{1,3})(?:\s*$|\s*[^\d])"),
    re.compile(r"(?:part|pt)[\s._-]+(\d{1,3})", re.IGNORECASE),
    re.compile(r"[^\d](\d{1,3})[^\d]"),
)


def extract_episode_number(filename: str) -> Optional[int]:
    """Extract a bare episode number (1-999) from *filename*.

    Examples:
        ``Name ep 12.mp4`` -> 12, ``S01E05.mp4`` -> 5, ``Show [05].mp4`` -> 5
    """
    base_name = re.sub(r"\.[^/.]+$", "", filename)
    padded = f" {base_name} "
    for pattern in EPISODE_NUMBER_PATTERNS:
        match = pattern.search(padded)
        if match:
            number = int(match.group(1))
            if 0 < number <= 999:
                return number
    return None


def split_name(name: str) -> Tuple[str, str]:
    """Split *name* into ``(base, ext)`` at the last dot.

    ``ext`` keeps its dot. A name whose only dot is at index 0 is a dotfile
    and has no extension.
    """
    dot = name.rfind(".")
    if dot > 0:
        return name[:dot], name[dot:]
    return name, ""


def replace_last_segment(path: str, new_name: str) -> str:
    """Replace the final path segment of *path* with *new_name*."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return f"{path[: cut + 1]}{new_name}"


def pad_number(value: int, width: Optional[int] = None) -> str:
    if not width or width <= 1:
        return str(value)
    return str(value).zfill(width)


def rules_from_options(options: RenameOptions) -> List[RenameRule]:
    """Build a rule list from flat options, skipping empty settings."""
    rules: List[RenameRule] = []
    if options.new_name and options.new_name.strip():
        rules.append(
            RenameRuleSpec(
                new_name=options.new_name.strip(),
                keep_extension=options.keep_extension,
            )
        )
    if options.search:
        rules.append(SearchReplaceRule(search=options.search, replace=options.replace))
    if options.prefix:
        rules.append(PrefixRule(value=options.prefix))
    if options.suffix:
        rules.append(SuffixRule(value=options.suffix))
    if options.numbering:
        rules.append(NumberingRule(width=options.number_width))
    series = options.series
    if series is not None and series.enabled:
        rules.append(
            SeriesRule(
                series_name=series.series_name,
                include_season=series.include_season,
                use_existing_episode_numbers=series.use_existing_episode_numbers,
                season_number=series.season_number,
                start_episode=series.start_episode,
                season_prefix=series.season_prefix,
                episode_prefix=series.episode_prefix,
                season_number_width=series.season_number_width,
                episode_number_width=series.episode_number_width,
            )
        )
    return rules


def order_rules(rules: Sequence[RenameRule]) -> List[RenameRule]:
    """Sort rules into evaluation order; same-kind rules keep their order."""
    return sorted(rules, key=lambda rule: RULE_ORDER.index(rule.type))


def _series_name(rule: SeriesRule, index: int, original_name: str) -> str:
    episode: Optional[int] = None
    if rule.use_existing_episode_numbers:
        episode = extract_episode_number(original_name)
        if episode is None:
            episode = rule.start_episode
    else:
        episode = rule.start_episode + index

    season_part = ""
    if rule.include_season:
        if rule.season_prefix == "Season":
            season_part = f"Season {rule.season_number}"
        else:
            season_part = f"S{pad_number(rule.season_number, rule.season_number_width)}"

    if rule.episode_prefix == "Episode":
        episode_part = f"Episode {episode}"
    else:
        episode_part = f"E{pad_number(episode, rule.episode_number_width)}"

    parts = [rule.series_name.strip(), season_part, episode_part]
    return " ".join(part for part in parts if part)


def apply_rules_to_base(
    base: str,
    rules: Sequence[RenameRule],
    index: int,
    original_name: str,
) -> Tuple[str, bool]:
    """Run *base* through the rule pipeline.

    Args:
        base: Base name without extension.
        rules: Rules in any order.
        index: 0-based position of the file in the batch.
        original_name: Full original filename, read by the series rule.

    Returns:
        Tuple of (new base, keep_extension).
    """
    name = base
    keep_extension = True
    for rule in order_rules(rules):
        if isinstance(rule, RenameRuleSpec):
            if rule.new_name:
                name = rule.new_name
                keep_extension = keep_extension and rule.keep_extension
        elif isinstance(rule, SearchReplaceRule):
            if rule.search:
                name = name.replace(rule.search, rule.replace)
        elif isinstance(rule, PrefixRule):
            name = f"{rule.value}{name}"
        elif isinstance(rule, SuffixRule):
            name = f"{name}{rule.value}"
        elif isinstance(rule, NumberingRule):
            name = f"{name}_{pad_number(index + 1, rule.width)}"
        elif isinstance(rule, SeriesRule):
            name = _series_name(rule, index, original_name)
    return name, keep_extension


def build_preview(
    files: Sequence[FileDescriptor], rules: Sequence[RenameRule]
) -> List[PreviewRow]:
    """Plan the rename of every file in *files*.

    Rows keep input order. A row is flagged as a conflict when its new path
    is also the target of another file in the batch, either a renamed one or
    one the rules leave in place; all rows sharing the path are flagged.
    """
    rows: List[PreviewRow] = []
    targets: Counter[str] = Counter()

    for index, file in enumerate(files):
        base, ext = split_name(file.name)
        if rules:
            new_base, keep_extension = apply_rules_to_base(base, rules, index, file.name)
        else:
            new_base, keep_extension = base, True
        new_name = f"{new_base}{ext if keep_extension else ''}"
        changed = new_name != file.name
        new_path = replace_last_segment(file.path, new_name) if changed else file.path

        rows.append(
            PreviewRow(
                path=file.path,
                old_name=file.name,
                new_name=new_name if changed else None,
                new_path=new_path if changed else None,
                changed=changed,
            )
        )
        targets[new_path] += 1

    for row in rows:
        if row.new_path is not None and targets[row.new_path] > 1:
            row.conflict = True

    conflicts = sum(1 for row in rows if row.conflict)
    if conflicts:
        logger.debug("Preview of %d files has %d conflicting rows", len(rows), conflicts)
    return rows
