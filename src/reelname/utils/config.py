"""Config utility for persistent reelname settings.

Settings are resolved with the precedence CLI value > environment variable
(``REELNAME_<DOTTED_KEY>``) > ``$XDG_CONFIG_HOME/reelname/config.toml`` >
default. Uses tomli/tomli-w for TOML parsing and writing.

Known keys:
- ``grouping.min_similarity`` and the ``grouping.*`` confidence weights
- ``history.capacity``
- ``patterns.default``
"""

import contextlib
import os
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import tomli
import tomli_w

from reelname.core.grouper import (
    BASE_CONFIDENCE,
    DEFAULT_MIN_SIMILARITY,
    DUBBING_BONUS,
    EPISODE_MATCH_BONUS,
    SUBTITLE_BONUS,
    GroupingWeights,
)
from reelname.core.undo import MAX_HISTORY

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
# Path like ~/.config/reelname or $XDG_CONFIG_HOME/reelname
CONFIG_DIR = _xdg_config_home / "reelname"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_PATTERN_ID = "sxe-dash"

T = TypeVar("T")

_TRUTHY = {"1", "true", "yes", "on"}


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""

    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="grouping.min_similarity" will attempt
    ``data["grouping"]["min_similarity"]`` returning None if any level is
    missing.
    """

    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = "REELNAME_") -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "history.capacity" -> "REELNAME_HISTORY_CAPACITY".
    """

    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:
    """Coerce a raw env/config value to the type of *default*.

    Values that cannot be coerced fall back to *default*.
    """
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.lower() in _TRUTHY)
        return default
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, int(value))
        return default
    if isinstance(default, float):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cast(T, float(value))
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, float(value))
        return default
    if default is None and isinstance(value, str):
        if value.isdigit():
            return cast(T, int(value))
        with contextlib.suppress(ValueError):
            return cast(T, float(value))
    return cast(T, value)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"grouping.min_similarity"``.
        default: Value to fall back to when no overrides found.
        cli_value: Value passed from CLI option (may be ``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """

    # 1. CLI value wins if provided (and not ``None`` to mimic Typer semantics).
    if cli_value is not None:
        return cli_value

    # 2. Environment variable
    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    # 3. Config file lookup
    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    # 4. Default
    return default


def set_setting(key: str, value: Any) -> None:
    """Write *value* under the dotted *key* in config.toml.

    Args:
        key: Dotted key path, e.g. ``"history.capacity"``.
        value: A TOML-serializable value.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = _read_config_file()
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        child = section.get(part)
        if not isinstance(child, dict):
            child = {}
            section[part] = child
        section = child
    section[leaf] = value
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)


def get_min_similarity(cli_value: Optional[float] = None) -> float:
    return resolve_setting(
        "grouping.min_similarity", default=DEFAULT_MIN_SIMILARITY, cli_value=cli_value
    )


def grouping_weights_from_config() -> GroupingWeights:
    """Build GroupingWeights from the ``grouping.*`` settings."""
    return GroupingWeights(
        base=resolve_setting("grouping.base_confidence", default=BASE_CONFIDENCE),
        episode_match=resolve_setting(
            "grouping.episode_match_bonus", default=EPISODE_MATCH_BONUS
        ),
        subtitles=resolve_setting("grouping.subtitle_bonus", default=SUBTITLE_BONUS),
        dubs=resolve_setting("grouping.dubbing_bonus", default=DUBBING_BONUS),
    )


def history_capacity_from_config() -> int:
    capacity = resolve_setting("history.capacity", default=MAX_HISTORY)
    return capacity if capacity > 0 else MAX_HISTORY


def get_default_pattern_id(cli_value: Optional[str] = None) -> str:
    return resolve_setting("patterns.default", default=DEFAULT_PATTERN_ID, cli_value=cli_value)
