"""Rename rule models.

A rule list is a closed tagged union discriminated on ``type``. The engine in
``reelname.core.rules`` evaluates rule kinds in the fixed order given by
RULE_ORDER, independent of the order rules appear in a list.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

RULE_ORDER: tuple[str, ...] = (
    "rename",
    "search-replace",
    "prefix",
    "suffix",
    "numbering",
    "series",
)


class RenameRuleSpec(BaseModel):
    """Replace the whole base name."""

    type: Literal["rename"] = "rename"
    new_name: str
    keep_extension: bool = True
    """When False the original extension is dropped from the result."""


class SearchReplaceRule(BaseModel):
    """Literal, non-regex replace-all inside the base name."""

    type: Literal["search-replace"] = "search-replace"
    search: str = ""
    replace: str = ""


class PrefixRule(BaseModel):
    type: Literal["prefix"] = "prefix"
    value: str = ""


class SuffixRule(BaseModel):
    type: Literal["suffix"] = "suffix"
    value: str = ""


class NumberingRule(BaseModel):
    """Append ``_`` and the 1-based batch index, zero padded to ``width``."""

    type: Literal["numbering"] = "numbering"
    width: int = 1


class SeriesRule(BaseModel):
    """Rebuild the name as ``{series_name} {season part} {episode part}``."""

    type: Literal["series"] = "series"
    series_name: str = ""
    include_season: bool = True
    use_existing_episode_numbers: bool = False
    season_number: int = 1
    start_episode: int = 1
    season_prefix: Literal["S", "Season"] = "S"
    episode_prefix: Literal["E", "Episode"] = "E"
    season_number_width: int = Field(default=2, ge=1, le=3)
    episode_number_width: int = Field(default=2, ge=1, le=3)


RenameRule = Annotated[
    Union[
        RenameRuleSpec,
        SearchReplaceRule,
        PrefixRule,
        SuffixRule,
        NumberingRule,
        SeriesRule,
    ],
    Field(discriminator="type"),
]

RULE_LIST_ADAPTER: TypeAdapter[List[RenameRule]] = TypeAdapter(List[RenameRule])


class SeriesOptions(BaseModel):
    """Series rule settings as collected from a form or the CLI."""

    enabled: bool = False
    series_name: str = ""
    include_season: bool = True
    season_number: int = 1
    start_episode: int = 1
    season_prefix: Literal["S", "Season"] = "S"
    episode_prefix: Literal["E", "Episode"] = "E"
    season_number_width: int = Field(default=2, ge=1, le=3)
    episode_number_width: int = Field(default=2, ge=1, le=3)
    use_existing_episode_numbers: bool = False


class RenameOptions(BaseModel):
    """Flat rename options from which a rule list is derived."""

    search: str = ""
    replace: str = ""
    prefix: str = ""
    suffix: str = ""
    numbering: bool = False
    number_width: int = 1
    new_name: Optional[str] = None
    keep_extension: bool = True
    series: Optional[SeriesOptions] = None
