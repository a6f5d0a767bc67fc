"""Turn previews into rename pairs.

The preview builders only flag conflicts; it is up to this module to leave
conflicted rows and groups out of the pairs handed to the filesystem service.
"""

from collections import Counter
from typing import Dict, List, Mapping, Sequence

from reelname.core.patterns import build_filename
from reelname.core.rules import replace_last_segment
from reelname.models.plan import FileGroup, PreviewRow, RenamePair, SeriesMetadata


def pairs_from_preview(rows: Sequence[PreviewRow]) -> List[RenamePair]:
    """Collect pairs for changed, non-conflicting preview rows."""
    return [
        RenamePair(from_path=row.path, to_path=row.new_path)
        for row in rows
        if row.changed and row.new_path and not row.conflict
    ]


def preview_group_targets(
    groups: Sequence[FileGroup], template: str, metadata: SeriesMetadata
) -> Dict[str, str]:
    """Map every grouped file's path to its new filename."""
    names: Dict[str, str] = {}
    for group in groups:
        for file in group.all_files():
            names[file.path] = build_filename(
                template, metadata, group.episode_info, file
            )
    return names


def mark_group_conflicts(
    groups: Sequence[FileGroup], names: Mapping[str, str]
) -> List[FileGroup]:
    """Set ``has_conflict`` on groups whose planned paths collide.

    A collision is any target path produced for more than one file across all
    groups. Every group owning one of those files is marked.
    """
    targets: Counter[str] = Counter()
    for group in groups:
        for file in group.all_files():
            targets[replace_last_segment(file.path, names.get(file.path, file.name))] += 1
    for group in groups:
        group.has_conflict = any(
            targets[replace_last_segment(f.path, names.get(f.path, f.name))] > 1
            for f in group.all_files()
        )
    return list(groups)


def pairs_from_groups(
    groups: Sequence[FileGroup], names: Mapping[str, str]
) -> List[RenamePair]:
    """Collect pairs for selected, non-conflicting groups.

    Files whose planned name equals their current name are skipped.
    """
    pairs: List[RenamePair] = []
    for group in groups:
        if not group.selected or group.has_conflict:
            continue
        for file in group.all_files():
            new_name = names.get(file.path)
            if new_name and new_name != file.name:
                pairs.append(
                    RenamePair(
                        from_path=file.path,
                        to_path=replace_last_segment(file.path, new_name),
                    )
                )
    return pairs


def conflicting_targets(pairs: Sequence[RenamePair]) -> List[str]:
    """Return target paths used by more than one pair, in first-seen order."""
    counts = Counter(pair.to_path for pair in pairs)
    return [target for target, count in counts.items() if count > 1]
