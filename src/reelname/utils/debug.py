"""Logging setup for reelname.

setup_logger() attaches one stream handler to the ``reelname`` logger. Debug
output is controlled by the REELNAME_DEBUG environment variable. Library modules
log through ``logging.getLogger(__name__)``, which propagates to the
``reelname`` logger configured here.
"""

import logging
import os
from typing import Optional

_logger: Optional[logging.Logger] = None


def debug_enabled() -> bool:
    return os.getenv("REELNAME_DEBUG", "0") == "1"


def setup_logger() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger
    logger = logging.getLogger("reelname")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if debug_enabled() else logging.WARNING)
    _logger = logger
    return logger

