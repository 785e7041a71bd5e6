"""
shapes/classifier.py

Structural classification of analysis payload values.
No key names are consulted, no I/O, no side effects.
"""

from __future__ import annotations

import logging
from typing import Any

from shapes.base import (
    ShapeInfo,
    ShapeTag,
    is_mapping,
    is_number,
    is_primitive,
    is_scalar,
    is_sequence,
)

logger = logging.getLogger(__name__)


class ShapeClassifier:
    """
    Maps any JSON value to exactly one :class:`ShapeTag`.

    Rules are evaluated in order and the first match wins:

        rule | value                                          | tag
        -----|------------------------------------------------|-----------------------
        1    | None, [] or {}                                 | empty
        2    | number, string or boolean                      | scalar
        3    | records, each with the same two keys           | categorical-pair-array
        4    | list of primitives                             | primitive-list
        5    | any other list of records                      | labeled-series
        6    | mapping of primitives                          | scalar-map
        7    | anything else                                  | nested

    Rule 3 is checked before rule 5 so a uniform two-key array is always a
    pair array. Rule 7 is total, so every value classifies.
    """

    def classify(self, value: Any) -> ShapeInfo:
        """
        Classify *value* by structure alone.

        Parameters
        ----------
        value:
            One value taken from ``insights`` or ``summary``.

        Returns
        -------
        ShapeInfo
            Tag plus the key metadata the dispatcher needs.
        """
        info = self._classify(value)
        logger.debug("Classified value tag=%s keys=%s length=%d", info.tag.value, info.keys, info.length)
        return info

    def _classify(self, value: Any) -> ShapeInfo:
        if value is None:
            return ShapeInfo(tag=ShapeTag.EMPTY)
        if is_sequence(value) and len(value) == 0:
            return ShapeInfo(tag=ShapeTag.EMPTY)
        if is_mapping(value) and len(value) == 0:
            return ShapeInfo(tag=ShapeTag.EMPTY)

        if is_scalar(value):
            return ShapeInfo(tag=ShapeTag.SCALAR, length=1)

        if is_sequence(value):
            return self._classify_sequence(value)

        if is_mapping(value) and all(is_primitive(item) for item in value.values()):
            return ShapeInfo(
                tag=ShapeTag.SCALAR_MAP,
                keys=tuple(str(key) for key in value),
                length=len(value),
            )

        return ShapeInfo(tag=ShapeTag.NESTED, length=len(value) if hasattr(value, "__len__") else 0)

    def _classify_sequence(self, items: list[Any] | tuple[Any, ...]) -> ShapeInfo:
        length = len(items)

        pair_keys = _uniform_pair_keys(items)
        if pair_keys is not None:
            return ShapeInfo(tag=ShapeTag.CATEGORICAL_PAIR_ARRAY, keys=pair_keys, length=length)

        if all(is_primitive(item) for item in items):
            return ShapeInfo(tag=ShapeTag.PRIMITIVE_LIST, length=length)

        if all(is_mapping(item) for item in items):
            keys: list[str] = []
            for item in items:
                for key in item:
                    if key not in keys:
                        keys.append(key)

            first = items[0]
            axis_key: str | None = None
            series_keys: list[str] = []
            for key, sample in first.items():
                if is_number(sample):
                    series_keys.append(key)
                elif axis_key is None:
                    axis_key = key
            return ShapeInfo(
                tag=ShapeTag.LABELED_SERIES,
                keys=tuple(keys),
                axis_key=axis_key,
                series_keys=tuple(series_keys),
                length=length,
            )

        return ShapeInfo(tag=ShapeTag.NESTED, length=length)


def _uniform_pair_keys(items: list[Any] | tuple[Any, ...]) -> tuple[str, ...] | None:
    first = items[0]
    if not is_mapping(first) or len(first) != 2:
        return None
    expected = set(first)
    for item in items[1:]:
        if not is_mapping(item) or len(item) != 2 or set(item) != expected:
            return None
    return tuple(first)


_DEFAULT_CLASSIFIER = ShapeClassifier()


def classify(value: Any) -> ShapeInfo:
    """Classify *value* with a shared stateless classifier."""
    return _DEFAULT_CLASSIFIER.classify(value)
