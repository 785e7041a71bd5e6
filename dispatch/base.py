"""
dispatch/base.py

Semantic roles, rendering strategies and the decision record handed to the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from shapes.base import ShapeTag


class Role(str, Enum):
    """Purpose a dashboard section plays, declared by the caller."""

    KPI_SET = "kpi-set"
    TOTALS = "totals"
    TREND = "trend"
    RANKING = "ranking"
    NARRATIVE_LIST = "narrative-list"
    GENERIC = "generic"


class Strategy(str, Enum):
    STAT_CARDS = "stat-cards"
    PIE = "pie"
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    RANKED_BAR = "ranked-bar"
    BULLET_LIST = "bullet-list"
    TABLE = "table"
    TEXT = "text"
    PLACEHOLDER = "placeholder"


CHART_STRATEGIES = frozenset({Strategy.PIE, Strategy.BAR, Strategy.LINE, Strategy.AREA, Strategy.RANKED_BAR})


@dataclass(frozen=True)
class StatCard:
    key: str
    label: str
    value: Any
    display: str


@dataclass(frozen=True)
class TableView:
    """Display-ready table; every cell is already formatted."""

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]

    def to_dict(self) -> dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(row) for row in self.rows]}


@dataclass(frozen=True)
class VisualizationDecision:
    """
    How one section is drawn.

    ``label_key``, ``value_key`` and ``series_keys`` bind chart strategies to
    the record keys discovered in the data. The remaining optional fields
    carry pre-formatted material for non-chart strategies. ``reason`` holds a
    failure code when the decision is a fallback or placeholder.
    """

    strategy: Strategy
    role: Role
    shape: ShapeTag
    label_key: str | None = None
    value_key: str | None = None
    series_keys: tuple[str, ...] = ()
    cards: tuple[StatCard, ...] = ()
    items: tuple[str, ...] = ()
    table: TableView | None = None
    text: str | None = None
    message: str | None = None
    reason: str | None = None

    @property
    def is_chart(self) -> bool:
        return self.strategy in CHART_STRATEGIES

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "role": self.role.value,
            "shape": self.shape.value,
            "label_key": self.label_key,
            "value_key": self.value_key,
            "series_keys": list(self.series_keys),
            "cards": [
                {"key": card.key, "label": card.label, "value": card.value, "display": card.display}
                for card in self.cards
            ],
            "items": list(self.items),
            "table": self.table.to_dict() if self.table is not None else None,
            "text": self.text,
            "message": self.message,
            "reason": self.reason,
        }
