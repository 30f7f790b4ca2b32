"""
Input validation for the year form.
"""
from __future__ import annotations

import re
from typing import Any

from .config import MAX_YEAR, MIN_YEAR

_DIGITS = re.compile(r"^\d+$")
_SIGNED = re.compile(r"^[+-]?\d+$")


def _strip_suffix(text: str, suffix: str) -> str:
    return text[: -len(suffix)].strip()


def parse_year(text: Any) -> int:
    """
    Parse free-text year input: "711", "711 CE", "300 BC", "-300".
    A trailing BC (or BCE) negates the number; a trailing CE keeps it positive.
    BCE is checked before CE, so "300 BCE" is -300 rather than a CE year.
    """
    if text is None or not isinstance(text, (str, int)) or isinstance(text, bool):
        raise ValueError("year must be a string or integer")
    val = str(text).strip().upper()

    if val.endswith("BCE"):
        number, sign = _strip_suffix(val, "BCE"), -1
    elif val.endswith("BC"):
        number, sign = _strip_suffix(val, "BC"), -1
    elif val.endswith("CE"):
        number, sign = _strip_suffix(val, "CE"), 1
    else:
        if not _SIGNED.match(val):
            raise ValueError(f"Invalid year: {text!r}")
        return validate_year(int(val))

    if not _DIGITS.match(number):
        raise ValueError(f"Invalid year: {text!r}")
    return validate_year(sign * int(number))


def validate_year(year: Any) -> int:
    """Validate year (-3000 to 2026)."""
    try:
        y = int(year)
    except (TypeError, ValueError):
        raise ValueError("year must be an integer")
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise ValueError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")
    return y
