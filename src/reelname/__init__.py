# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""reelname - Batch rename planner for series video, subtitle and dub files."""

from reelname.__about__ import __version__

__all__ = ["__version__"]
