"""Utility modules for reelname."""

from reelname.utils.config import resolve_setting, set_setting
from reelname.utils.debug import setup_logger

__all__ = [
    "resolve_setting",
    "set_setting",
    "setup_logger",
]
