"""
dashboard/summary.py

Per-field statistics cards built from ``AnalysisPayload.summary``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from app.domain.analysis_payload import (
    FIELD_DESCRIPTOR_ADAPTER,
    BooleanFieldDescriptor,
    CategoricalFieldDescriptor,
    NumericFieldDescriptor,
    ValueCount,
)
from app.failure_codes import INVALID_DESCRIPTOR
from dispatch.formatting import DEFAULT_DECIMALS, format_value, title_case
from shapes.base import is_number

logger = logging.getLogger(__name__)

NUMERIC_STATS: tuple[str, ...] = ("min", "max", "mean", "median", "stddev", "count")


@dataclass(frozen=True)
class FieldSummary:
    name: str
    label: str
    field_type: str
    stats: tuple[tuple[str, str], ...] = ()
    values: tuple[tuple[str, str], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "type": self.field_type,
            "stats": [{"label": label, "display": display} for label, display in self.stats],
            "values": [{"value": value, "count": count} for value, count in self.values],
        }


def summarize_fields(
    summary: Mapping[str, Any],
    *,
    decimals: int = DEFAULT_DECIMALS,
) -> list[FieldSummary]:
    """
    Build one :class:`FieldSummary` per valid field descriptor.

    Descriptors are validated against the ``type`` discriminator first;
    anything that fails is logged and skipped so one bad field never hides
    the rest of the summary.
    """
    results: list[FieldSummary] = []
    for name, raw in summary.items():
        try:
            descriptor = FIELD_DESCRIPTOR_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            logger.warning(
                "Skipping field '%s' (%s): %d validation error(s)",
                name,
                INVALID_DESCRIPTOR,
                exc.error_count(),
            )
            continue

        label = title_case(name)
        if isinstance(descriptor, NumericFieldDescriptor):
            results.append(_numeric_summary(str(name), label, descriptor, decimals))
        elif isinstance(descriptor, CategoricalFieldDescriptor):
            stats = (("Unique Values", format_value(descriptor.unique_count, decimals)),)
            results.append(
                FieldSummary(
                    name=str(name),
                    label=label,
                    field_type=descriptor.type,
                    stats=stats,
                    values=_value_counts(descriptor.top_values, decimals),
                )
            )
        elif isinstance(descriptor, BooleanFieldDescriptor):
            results.append(
                FieldSummary(
                    name=str(name),
                    label=label,
                    field_type=descriptor.type,
                    values=_value_counts(descriptor.counts, decimals),
                )
            )
    return results


def _numeric_summary(
    name: str,
    label: str,
    descriptor: NumericFieldDescriptor,
    decimals: int,
) -> FieldSummary:
    stats = [(title_case(stat), format_value(getattr(descriptor, stat), decimals)) for stat in NUMERIC_STATS]
    if is_number(descriptor.min) and is_number(descriptor.max):
        stats.append(("Range", format_value(descriptor.max - descriptor.min, decimals)))
    return FieldSummary(name=name, label=label, field_type=descriptor.type, stats=tuple(stats))


def _value_counts(counts: list[ValueCount], decimals: int) -> tuple[tuple[str, str], ...]:
    return tuple((format_value(item.value, decimals), format_value(item.count, decimals)) for item in counts)
