"""
dispatch/fallback.py

Generic fallback rendering for values no specific strategy handles.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from app.failure_codes import NO_DATA
from dispatch.base import Role, Strategy, TableView, VisualizationDecision
from dispatch.formatting import format_structure, format_value, title_case
from shapes.base import ShapeInfo, ShapeTag
from shapes.reshape import columnar_to_records

NO_DATA_MESSAGE = "No data available."


def records_table(records: Sequence[Mapping[str, Any]], columns: Sequence[str], decimals: int) -> TableView:
    return TableView(
        columns=tuple(columns),
        rows=tuple(
            tuple(format_value(record.get(column), decimals) if column in record else "" for column in columns)
            for record in records
        ),
    )


def key_value_table(mapping: Mapping[str, Any], decimals: int) -> TableView:
    return TableView(
        columns=("Field", "Value"),
        rows=tuple((title_case(key), format_value(value, decimals)) for key, value in mapping.items()),
    )


def fallback_decision(
    role: Role,
    value: Any,
    shape: ShapeInfo,
    *,
    decimals: int,
    reason: str | None = None,
) -> VisualizationDecision:
    """
    Pretty-print *value*: a table when a tabular shape is found, else text.

    Tabular shapes are parallel equal-length arrays (or a pair of them),
    record lists and scalar maps. Never raises.
    """

    if shape.tag is ShapeTag.EMPTY:
        return VisualizationDecision(
            strategy=Strategy.TEXT,
            role=role,
            shape=shape.tag,
            message=NO_DATA_MESSAGE,
            reason=reason or NO_DATA,
        )

    if shape.tag is ShapeTag.SCALAR:
        return VisualizationDecision(
            strategy=Strategy.TEXT,
            role=role,
            shape=shape.tag,
            text=format_value(value, decimals),
            reason=reason,
        )

    if shape.tag is ShapeTag.PRIMITIVE_LIST:
        return VisualizationDecision(
            strategy=Strategy.BULLET_LIST,
            role=role,
            shape=shape.tag,
            items=tuple(format_value(item, decimals) for item in value),
            reason=reason,
        )

    if shape.tag in (ShapeTag.CATEGORICAL_PAIR_ARRAY, ShapeTag.LABELED_SERIES):
        return VisualizationDecision(
            strategy=Strategy.TABLE,
            role=role,
            shape=shape.tag,
            table=records_table(value, shape.keys, decimals),
            reason=reason,
        )

    if shape.tag is ShapeTag.SCALAR_MAP:
        return VisualizationDecision(
            strategy=Strategy.TABLE,
            role=role,
            shape=shape.tag,
            table=key_value_table(value, decimals),
            reason=reason,
        )

    records = columnar_to_records(value)
    if records:
        return VisualizationDecision(
            strategy=Strategy.TABLE,
            role=role,
            shape=shape.tag,
            table=records_table(records, list(records[0]), decimals),
            reason=reason,
        )

    return VisualizationDecision(
        strategy=Strategy.TEXT,
        role=role,
        shape=shape.tag,
        text=format_structure(value, decimals),
        reason=reason,
    )
