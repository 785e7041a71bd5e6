"""
dispatch/dispatcher.py

Chooses a rendering strategy from a section's semantic role and data shape.

Dispatch table (role x shape -> strategy):

    role            | shape                                   | strategy
    ----------------|-----------------------------------------|---------------------------
    kpi-set         | scalar-map                              | stat cards
    totals          | categorical-pair-array                  | pie (few, non-negative) or bar
    totals          | labeled-series                          | line
    totals          | scalar-map / nested                     | table or formatted text
    trend           | labeled-series / categorical-pair-array | area, or placeholder if < 3 points
    ranking         | record list                             | ranked bar + paired list
    narrative-list  | primitive-list of strings               | bullet list
    anything else   | any                                     | generic fallback

Dispatch never raises. Unmatched combinations resolve to the generic
fallback with ``reason="dispatch_miss"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from app.failure_codes import DISPATCH_MISS, NOT_ENOUGH_DATA
from dispatch.base import Role, StatCard, Strategy, TableView, VisualizationDecision
from dispatch.fallback import fallback_decision, key_value_table
from dispatch.formatting import DEFAULT_DECIMALS, format_percent, format_value, strip_lead_ins, title_case
from shapes.base import ShapeInfo, ShapeTag, is_number
from shapes.classifier import ShapeClassifier

logger = logging.getLogger(__name__)

CURRENCY_KEY_MARKERS: tuple[str, ...] = ("total", "avg", "median")

NOT_ENOUGH_DATA_MESSAGE = "Not enough data to show a trend (at least {minimum} points are needed)."

Handler = Callable[[Any, ShapeInfo, "DispatchHints"], "VisualizationDecision | None"]


@dataclass(frozen=True)
class DispatchHints:
    """
    Optional per-section hints supplied by the industry profile.

    ``value_key`` names the preferred value column of a two-key record
    array or ranking. ``currency_symbol`` prefixes money-like stat cards.
    Stat cards whose key contains one of ``percent_markers`` are shown as
    percentages. ``lead_ins`` are boilerplate phrases removed from
    narrative text.
    """

    value_key: str | None = None
    currency_symbol: str | None = None
    percent_markers: tuple[str, ...] = ()
    lead_ins: tuple[str, ...] = ()


class VisualizationDispatcher:
    """
    Stateless role x shape dispatcher.

    Usage::

        dispatcher = VisualizationDispatcher()
        decision = dispatcher.dispatch("totals", [{"Region": "North", "Sales": 100}, ...])
        decision.strategy  # Strategy.PIE
    """

    def __init__(
        self,
        *,
        classifier: ShapeClassifier | None = None,
        display_decimals: int = DEFAULT_DECIMALS,
        min_trend_points: int = 3,
        pie_max_slices: int = 8,
    ) -> None:
        self._classifier = classifier or ShapeClassifier()
        self._decimals = display_decimals
        self._min_trend_points = min_trend_points
        self._pie_max_slices = pie_max_slices
        self._handlers: dict[tuple[Role, ShapeTag], Handler] = {
            (Role.KPI_SET, ShapeTag.SCALAR_MAP): self._stat_cards,
            (Role.TOTALS, ShapeTag.CATEGORICAL_PAIR_ARRAY): self._proportional,
            (Role.TOTALS, ShapeTag.LABELED_SERIES): self._line,
            (Role.TOTALS, ShapeTag.SCALAR_MAP): self._key_value_table,
            (Role.TOTALS, ShapeTag.NESTED): self._formatted_fallback,
            (Role.TREND, ShapeTag.LABELED_SERIES): self._trend,
            (Role.TREND, ShapeTag.CATEGORICAL_PAIR_ARRAY): self._trend,
            (Role.TREND, ShapeTag.EMPTY): self._trend,
            (Role.RANKING, ShapeTag.CATEGORICAL_PAIR_ARRAY): self._ranking,
            (Role.RANKING, ShapeTag.LABELED_SERIES): self._ranking,
            (Role.NARRATIVE_LIST, ShapeTag.PRIMITIVE_LIST): self._bullets,
            (Role.NARRATIVE_LIST, ShapeTag.SCALAR): self._paragraph,
        }

    def dispatch(
        self,
        role: Role | str,
        value: Any,
        shape: ShapeInfo | None = None,
        *,
        value_key: str | None = None,
        currency_symbol: str | None = None,
        percent_markers: tuple[str, ...] = (),
        lead_ins: tuple[str, ...] = (),
    ) -> VisualizationDecision:
        """
        Decide how *value* is drawn for *role*.

        Parameters
        ----------
        role:
            Declared semantic role. Unknown role names fall back to
            ``generic``.
        value:
            The section value, unchanged from the payload.
        shape:
            Pre-computed classification of *value*; classified here if omitted.
        value_key:
            Preferred value column for two-key record arrays.
        currency_symbol:
            Prefix for money-like stat cards.
        percent_markers:
            Key fragments marking stat cards shown as percentages. These win
            over the currency prefix.
        lead_ins:
            Boilerplate phrases stripped from narrative paragraphs and bullets.
        """
        resolved_role = _coerce_role(role)
        info = shape if shape is not None else self._classifier.classify(value)
        hints = DispatchHints(
            value_key=value_key,
            currency_symbol=currency_symbol,
            percent_markers=tuple(percent_markers),
            lead_ins=tuple(lead_ins),
        )

        handler = self._handlers.get((resolved_role, info.tag))
        decision = handler(value, info, hints) if handler is not None else None
        if decision is not None:
            logger.debug(
                "Dispatched role=%s shape=%s strategy=%s",
                resolved_role.value,
                info.tag.value,
                decision.strategy.value,
            )
            return decision

        reason = None if resolved_role is Role.GENERIC else DISPATCH_MISS
        if reason is not None:
            logger.warning(
                "No strategy for role=%s shape=%s; using generic fallback",
                resolved_role.value,
                info.tag.value,
            )
        return fallback_decision(resolved_role, value, info, decimals=self._decimals, reason=reason)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _stat_cards(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision:
        cards = []
        for key, item in value.items():
            if _has_marker(key, hints.percent_markers):
                display = format_percent(item)
            else:
                display = format_value(item, self._decimals)
                if hints.currency_symbol and is_number(item) and _has_marker(key, CURRENCY_KEY_MARKERS):
                    display = f"{hints.currency_symbol}{display}"
            cards.append(StatCard(key=str(key), label=title_case(key), value=item, display=display))
        return VisualizationDecision(
            strategy=Strategy.STAT_CARDS,
            role=Role.KPI_SET,
            shape=shape.tag,
            cards=tuple(cards),
        )

    def _proportional(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        label_key, value_key = _pair_bindings(value, shape.keys, hints.value_key)
        values = [record.get(value_key) for record in value]
        if not any(is_number(item) for item in values):
            return None

        use_pie = (
            len(values) <= self._pie_max_slices
            and all(is_number(item) and item >= 0 for item in values)
            and sum(values) > 0
        )
        return VisualizationDecision(
            strategy=Strategy.PIE if use_pie else Strategy.BAR,
            role=Role.TOTALS,
            shape=shape.tag,
            label_key=label_key,
            value_key=value_key,
            series_keys=(value_key,),
        )

    def _line(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        if shape.axis_key is None or not shape.series_keys:
            return None
        return VisualizationDecision(
            strategy=Strategy.LINE,
            role=Role.TOTALS,
            shape=shape.tag,
            label_key=shape.axis_key,
            value_key=shape.series_keys[0],
            series_keys=shape.series_keys,
        )

    def _key_value_table(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision:
        return VisualizationDecision(
            strategy=Strategy.TABLE,
            role=Role.TOTALS,
            shape=shape.tag,
            table=key_value_table(value, self._decimals),
        )

    def _formatted_fallback(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision:
        return fallback_decision(Role.TOTALS, value, shape, decimals=self._decimals)

    def _trend(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        if shape.length < self._min_trend_points:
            return VisualizationDecision(
                strategy=Strategy.PLACEHOLDER,
                role=Role.TREND,
                shape=shape.tag,
                message=NOT_ENOUGH_DATA_MESSAGE.format(minimum=self._min_trend_points),
                reason=NOT_ENOUGH_DATA,
            )

        if shape.tag is ShapeTag.CATEGORICAL_PAIR_ARRAY:
            axis_key, value_key = _pair_bindings(value, shape.keys, hints.value_key)
            if not any(is_number(record.get(value_key)) for record in value):
                return None
            series_keys: tuple[str, ...] = (value_key,)
        else:
            if shape.axis_key is None or not shape.series_keys:
                return None
            axis_key = shape.axis_key
            # First numeric key is the main series; the others stay available.
            value_key = shape.series_keys[0]
            series_keys = shape.series_keys

        return VisualizationDecision(
            strategy=Strategy.AREA,
            role=Role.TREND,
            shape=shape.tag,
            label_key=axis_key,
            value_key=value_key,
            series_keys=series_keys,
        )

    def _ranking(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        first = value[0]
        label_key = next((key for key, item in first.items() if isinstance(item, str)), None)
        if hints.value_key is not None and is_number(first.get(hints.value_key)):
            value_key = hints.value_key
        else:
            value_key = next((key for key, item in first.items() if is_number(item)), None)
        if label_key is None or value_key is None:
            return None

        rows = tuple(
            (
                str(rank),
                format_value(record.get(label_key), self._decimals),
                format_value(record.get(value_key), self._decimals),
            )
            for rank, record in enumerate(value, start=1)
        )
        return VisualizationDecision(
            strategy=Strategy.RANKED_BAR,
            role=Role.RANKING,
            shape=shape.tag,
            label_key=label_key,
            value_key=value_key,
            series_keys=(value_key,),
            table=TableView(columns=("Rank", label_key, value_key), rows=rows),
        )

    def _bullets(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        if not all(isinstance(item, str) for item in value):
            return None
        return VisualizationDecision(
            strategy=Strategy.BULLET_LIST,
            role=Role.NARRATIVE_LIST,
            shape=shape.tag,
            items=tuple(strip_lead_ins(item, hints.lead_ins) for item in value),
        )

    def _paragraph(self, value: Any, shape: ShapeInfo, hints: DispatchHints) -> VisualizationDecision | None:
        if not isinstance(value, str):
            return None
        return VisualizationDecision(
            strategy=Strategy.TEXT,
            role=Role.NARRATIVE_LIST,
            shape=shape.tag,
            text=strip_lead_ins(value, hints.lead_ins),
        )


def _coerce_role(role: Role | str) -> Role:
    if isinstance(role, Role):
        return role
    try:
        return Role(str(role).strip().lower())
    except ValueError:
        logger.warning("Unknown role %r; treating as generic", role)
        return Role.GENERIC


def _has_marker(key: Any, markers: tuple[str, ...]) -> bool:
    lowered = str(key).lower()
    return any(marker.lower() in lowered for marker in markers)


def _pair_bindings(records: Any, keys: tuple[str, ...], value_key_hint: str | None) -> tuple[str, str]:
    """
    Pick (label key, value key) for a two-key record array.

    A declared hint wins; otherwise the first key is the label unless it holds
    a number while the second does not.
    """
    first_key, second_key = keys
    if value_key_hint in keys:
        return (second_key, first_key) if value_key_hint == first_key else (first_key, second_key)

    sample = records[0]
    if is_number(sample.get(first_key)) and not is_number(sample.get(second_key)):
        return second_key, first_key
    return first_key, second_key
