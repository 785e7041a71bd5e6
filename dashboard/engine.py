"""
dashboard/engine.py

One render pass over an analysis payload.

For every insights section the engine classifies the value, recovers records
from columnar encodings, expands grouped sections into one panel per nested
child (loose scalars in a group share a single panel), applies the selected
window to trend series and asks the dispatcher how each panel is drawn.
Industry differences live entirely in :class:`IndustryProfile`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.domain.analysis_payload import AnalysisPayload
from dashboard.summary import FieldSummary, summarize_fields
from dispatch.base import Role, VisualizationDecision
from dispatch.dispatcher import VisualizationDispatcher
from dispatch.formatting import DEFAULT_DECIMALS, title_case
from industry.profiles import IndustryProfile
from shapes.base import ShapeInfo, ShapeTag, is_mapping, is_number, is_primitive
from shapes.classifier import ShapeClassifier
from shapes.reshape import columnar_to_records
from temporal.filter import DEFAULT_DATE_KEY, TemporalWindowFilter
from temporal.window import WindowSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanelView:
    section: str
    key: str
    title: str
    role: Role
    decision: VisualizationDecision
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "key": self.key,
            "title": self.title,
            "role": self.role.value,
            "decision": self.decision.to_dict(),
            "data": self.data,
        }


@dataclass(frozen=True)
class DashboardView:
    industry: str
    title: str
    palette: tuple[str, ...]
    window: WindowSpec
    panels: tuple[PanelView, ...] = ()
    fields: tuple[FieldSummary, ...] = field(default_factory=tuple)

    def panels_for(self, section: str) -> list[PanelView]:
        return [panel for panel in self.panels if panel.section == section]

    def to_dict(self) -> dict[str, Any]:
        return {
            "industry": self.industry,
            "title": self.title,
            "palette": list(self.palette),
            "window": self.window.to_dict(),
            "panels": [panel.to_dict() for panel in self.panels],
            "fields": [summary.to_dict() for summary in self.fields],
        }


class DashboardEngine:
    """
    Renders any industry's dashboard from its profile.

    Usage::

        engine = DashboardEngine(get_profile("retail"))
        view = engine.render(payload, WindowSpec.fixed_days(30))
        for panel in view.panels:
            panel.decision.strategy
    """

    def __init__(
        self,
        profile: IndustryProfile,
        *,
        classifier: ShapeClassifier | None = None,
        dispatcher: VisualizationDispatcher | None = None,
        window_filter: TemporalWindowFilter | None = None,
        display_decimals: int = DEFAULT_DECIMALS,
    ) -> None:
        self.profile = profile
        self._classifier = classifier or ShapeClassifier()
        self._dispatcher = dispatcher or VisualizationDispatcher(
            classifier=self._classifier,
            display_decimals=display_decimals,
        )
        self._window_filter = window_filter or TemporalWindowFilter()
        self._decimals = display_decimals

    def render(
        self,
        payload: AnalysisPayload | Mapping[str, Any],
        window: WindowSpec | None = None,
    ) -> DashboardView:
        """
        Decide the presentation of every section present in *payload*.

        Sections appear in profile order; sections the profile does not know
        follow in payload order and render with the ``generic`` role.
        """
        analysis = payload if isinstance(payload, AnalysisPayload) else AnalysisPayload.model_validate(payload)
        spec = window or WindowSpec.all()

        ordered = [name for name in self.profile.section_roles if name in analysis.insights]
        ordered += [name for name in analysis.insights if name not in self.profile.section_roles]

        panels: list[PanelView] = []
        for section in ordered:
            panels.extend(self._render_section(section, analysis.insights[section], spec))

        fields = summarize_fields(analysis.summary, decimals=self._decimals)
        logger.info(
            "Rendered industry=%s panels=%d fields=%d window=%s",
            self.profile.key,
            len(panels),
            len(fields),
            spec.mode.value,
        )
        return DashboardView(
            industry=self.profile.key,
            title=self.profile.title,
            palette=self.profile.palette,
            window=spec,
            panels=tuple(panels),
            fields=tuple(fields),
        )

    def _render_section(self, section: str, value: Any, window: WindowSpec) -> list[PanelView]:
        role = self.profile.role_for(section)
        value, shape = self._recover_records(value)

        if shape.tag is ShapeTag.NESTED and is_mapping(value) and role is not Role.GENERIC:
            scalars = {key: child for key, child in value.items() if is_primitive(child)}
            groups = {key: child for key, child in value.items() if not is_primitive(child)}
            logger.debug(
                "Expanding grouped section=%s into %d panel(s) and %d scalar(s)",
                section,
                len(groups),
                len(scalars),
            )
            panels = []
            # Scalars stay together as one panel so they render as stat cards.
            if scalars:
                panels.append(
                    self._panel(section, section, scalars, self._classifier.classify(scalars), role, window)
                )
            for key, child in groups.items():
                child_value, child_shape = self._recover_records(child)
                panels.append(self._panel(section, str(key), child_value, child_shape, role, window))
            return panels

        return [self._panel(section, section, value, shape, role, window)]

    def _recover_records(self, value: Any) -> tuple[Any, ShapeInfo]:
        shape = self._classifier.classify(value)
        if shape.tag is ShapeTag.NESTED:
            records = columnar_to_records(value)
            if records is not None:
                return records, self._classifier.classify(records)
        return value, shape

    def _panel(
        self,
        section: str,
        key: str,
        value: Any,
        shape: ShapeInfo,
        role: Role,
        window: WindowSpec,
    ) -> PanelView:
        value_key = self.profile.value_keys.get(key) or self.profile.value_keys.get(section)

        if role is Role.TREND and shape.tag in (ShapeTag.LABELED_SERIES, ShapeTag.CATEGORICAL_PAIR_ARRAY):
            date_key = _date_key(value, shape, value_key)
            windowed = self._window_filter.apply(value, window, date_key=date_key)
            if len(windowed) != len(value):
                logger.debug(
                    "Window %s kept %d of %d point(s) for %s.%s",
                    window.mode.value,
                    len(windowed),
                    len(value),
                    section,
                    key,
                )
                value = windowed
                shape = self._classifier.classify(value)

        decision = self._dispatcher.dispatch(
            role,
            value,
            shape,
            value_key=value_key,
            currency_symbol=self.profile.currency_symbol,
            percent_markers=self.profile.percent_markers,
            lead_ins=self.profile.narrative_lead_ins,
        )
        return PanelView(
            section=section,
            key=key,
            title=self._title(section, key),
            role=role,
            decision=decision,
            data=value,
        )

    def _title(self, section: str, key: str) -> str:
        if key in self.profile.panel_titles:
            return self.profile.panel_titles[key]
        if key == section:
            return self.profile.section_title(section) or title_case(section)
        return title_case(key)


def _date_key(records: Any, shape: ShapeInfo, value_key: str | None) -> str:
    if shape.tag is ShapeTag.LABELED_SERIES:
        return shape.axis_key or DEFAULT_DATE_KEY

    first = records[0]
    for key in shape.keys:
        if key != value_key and not is_number(first.get(key)):
            return key
    return DEFAULT_DATE_KEY
