"""
shapes/base.py

Shape tags and structural metadata for analysis payload values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ShapeTag(str, Enum):
    EMPTY = "empty"
    SCALAR = "scalar"
    SCALAR_MAP = "scalar-map"
    CATEGORICAL_PAIR_ARRAY = "categorical-pair-array"
    LABELED_SERIES = "labeled-series"
    PRIMITIVE_LIST = "primitive-list"
    NESTED = "nested"


@dataclass(frozen=True)
class ShapeInfo:
    """
    Classification result for one JSON value.

    ``keys`` holds the record keys in first-seen order for record arrays
    (the two keys of a pair array, or every key of a labeled series) and the
    mapping keys for scalar maps. ``axis_key`` and ``series_keys`` are only
    set for labeled series.
    """

    tag: ShapeTag
    keys: tuple[str, ...] = ()
    axis_key: str | None = None
    series_keys: tuple[str, ...] = ()
    length: int = 0


def is_number(value: Any) -> bool:
    """True for ints and floats; booleans are not numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, bool)) or is_number(value)


def is_primitive(value: Any) -> bool:
    """Scalars plus JSON null, as allowed inside lists and maps."""
    return value is None or is_scalar(value)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)
