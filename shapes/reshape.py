"""
shapes/reshape.py

Conversion of columnar payload encodings into record lists.

The analysis service emits some series column-wise instead of as records:

* parallel arrays: ``{"Region": ["North", "South"], "Sales": [100, 200]}``
* a pair of arrays: ``[["North", "South"], [100, 200]]``

Both classify as ``nested``. ``columnar_to_records`` turns them into the
equivalent record list so they can be charted like any other series.
"""

from __future__ import annotations

from typing import Any

from shapes.base import is_mapping, is_primitive, is_sequence

PAIR_LABEL_KEY = "label"
PAIR_VALUE_KEY = "value"


def parallel_columns(value: Any) -> dict[str, list[Any]] | None:
    """
    Return *value* as ``{column: values}`` when it is a mapping of at least
    two non-empty, equal-length primitive lists, else ``None``.
    """

    if not is_mapping(value) or len(value) < 2:
        return None

    columns: dict[str, list[Any]] = {}
    expected_length: int | None = None
    for key, column in value.items():
        if not is_sequence(column) or not column:
            return None
        if not all(is_primitive(item) for item in column):
            return None
        if expected_length is None:
            expected_length = len(column)
        elif len(column) != expected_length:
            return None
        columns[str(key)] = list(column)
    return columns


def columnar_to_records(value: Any) -> list[dict[str, Any]] | None:
    """
    Convert a columnar encoding into records, preserving row order.

    Returns ``None`` when *value* is neither parallel arrays nor a pair of
    equal-length arrays.
    """

    columns = parallel_columns(value)
    if columns is None and is_sequence(value) and len(value) == 2:
        columns = parallel_columns({PAIR_LABEL_KEY: value[0], PAIR_VALUE_KEY: value[1]})
    if columns is None:
        return None

    names = list(columns)
    row_count = len(columns[names[0]])
    return [{name: columns[name][index] for name in names} for index in range(row_count)]
