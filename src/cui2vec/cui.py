"""
Conversions between UMLS concept unique identifiers and integers.

A CUI is the letter ``C`` followed by a zero-padded, seven digit number,
e.g. ``C0000005``. Values that need more than seven digits are written
without padding.
"""

from __future__ import annotations

import re

CUI_PREFIX = "C"
CUI_DIGITS = 7

_CUI_PATTERN = re.compile(rf"{CUI_PREFIX}(\d{{{CUI_DIGITS}}}|[1-9]\d{{{CUI_DIGITS},}})")


def is_cui(cui: str) -> bool:
    return _CUI_PATTERN.fullmatch(cui) is not None


def cui_to_int(cui: str) -> int:
    """Convert a string CUI into an integer, e.g. ``"C0000005" -> 5``."""
    match = _CUI_PATTERN.fullmatch(cui)
    if match is None:
        raise ValueError(f"{cui} is not a cui")
    return int(match.group(1))


def int_to_cui(value: int) -> str:
    """Convert an integer into a CUI, e.g. ``5 -> "C0000005"``."""
    if value < 0:
        raise ValueError(f"CUI values are non-negative, got {value}")
    return f"{CUI_PREFIX}{value:0{CUI_DIGITS}d}"


__all__ = ["CUI_PREFIX", "CUI_DIGITS", "is_cui", "cui_to_int", "int_to_cui"]
