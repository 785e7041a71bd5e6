"""
dispatch/formatting.py

Display formatting. Works on copies only; payload values are never changed.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from shapes.base import is_number, is_sequence

DEFAULT_DECIMALS = 4
MISSING_DISPLAY = "N/A"

_WORD_SEPARATORS = re.compile(r"[\s_]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def round_for_display(value: float | int, decimals: int = DEFAULT_DECIMALS) -> float | int:
    """
    Round *value* to *decimals* places; integral results come back as ``int``.
    """

    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        return value
    rounded = round(value, decimals)
    if float(rounded).is_integer():
        return int(rounded)
    return rounded


def format_number(value: float | int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Format a number for display: at most *decimals* places, no trailing zeros.

    >>> format_number(1234.5678)
    '1234.5678'
    >>> format_number(10.0)
    '10'
    >>> format_number(0.123456)
    '0.1235'
    """

    rounded = round_for_display(value, decimals)
    if isinstance(rounded, int):
        return str(rounded)
    if not math.isfinite(rounded):
        return str(rounded)
    return f"{rounded:.{decimals}f}".rstrip("0").rstrip(".")


def format_value(value: Any, decimals: int = DEFAULT_DECIMALS) -> str:
    if value is None:
        return MISSING_DISPLAY
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value, decimals)
    if isinstance(value, str):
        return value
    return format_structure(value, decimals)


def title_case(key: str) -> str:
    """
    Turn a payload key into a label: ``total_sales`` -> ``Total Sales``.

    Only the first letter of each word is changed, so acronyms survive.
    """

    text = _CAMEL_BOUNDARY.sub(" ", str(key))
    words = [word for word in _WORD_SEPARATORS.split(text) if word]
    return " ".join(word[0].upper() + word[1:] for word in words)


def display_copy(value: Any, decimals: int = DEFAULT_DECIMALS) -> Any:
    """
    Deep copy of a JSON value with every number rounded for display.
    """

    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if is_number(value):
        return round_for_display(value, decimals)
    if isinstance(value, Mapping):
        return {str(key): display_copy(item, decimals) for key, item in value.items()}
    if is_sequence(value):
        return [display_copy(item, decimals) for item in value]
    return str(value)


def format_structure(value: Any, decimals: int = DEFAULT_DECIMALS) -> str:
    """Pretty-printed JSON text with display rounding applied."""
    return json.dumps(display_copy(value, decimals), indent=2, ensure_ascii=False, default=str)


def format_percent(value: Any, decimals: int = 2) -> str:
    """
    Percentage display: strings already carrying ``%`` pass through and
    numbers get *decimals* places plus a ``%`` suffix.

    >>> format_percent(3.14159)
    '3.14%'
    >>> format_percent("12.5%")
    '12.5%'
    """

    if isinstance(value, str) and "%" in value:
        return value
    if is_number(value) and math.isfinite(value):
        return f"{value:.{decimals}f}%"
    return format_value(value)


def strip_lead_ins(text: str, lead_ins: tuple[str, ...]) -> str:
    """Remove boilerplate lead-in phrases from generated prose, then trim."""
    for phrase in lead_ins:
        if phrase:
            text = text.replace(phrase, "", 1)
    return text.strip()
