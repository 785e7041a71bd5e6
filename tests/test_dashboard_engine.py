"""
tests/test_dashboard_engine.py

Pytest tests for one DashboardEngine render pass over complete payloads.

Coverage
--------
- End-to-end scenarios: KPI stat card, regional totals pie, short trend placeholder
- Grouped sections expanded into one panel per child, loose KPI scalars kept together
- Columnar encodings recovered as chartable records
- Trend windows applied before dispatch
- Section ordering, unknown sections and narrative sections
- Industry profile differences (currency, percentages, titles, value-key hints,
  narrative lead-ins)
"""

from __future__ import annotations

import copy
from datetime import date, timedelta

import pytest

from app.failure_codes import DISPATCH_MISS, NOT_ENOUGH_DATA
from app.validators.alias_table_validator import ConfigurationError
from dashboard.engine import DashboardEngine
from dispatch.base import Role, Strategy
from industry.profiles import get_profile
from temporal.window import WindowSpec


def _trend(days: int) -> list[dict]:
    start = date(2024, 1, 1)
    return [{"date": (start + timedelta(days=offset)).isoformat(), "total": 10 + offset} for offset in range(days)]


@pytest.fixture()
def retail() -> DashboardEngine:
    return DashboardEngine(get_profile("retail"))


@pytest.fixture()
def healthcare() -> DashboardEngine:
    return DashboardEngine(get_profile("healthcare"))


@pytest.fixture()
def finance() -> DashboardEngine:
    return DashboardEngine(get_profile("finance"))


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


def test_kpi_renders_single_stat_card(healthcare: DashboardEngine) -> None:
    view = healthcare.render({"insights": {"kpis": {"total_sales": 1234.5678}}})

    [panel] = view.panels_for("kpis")
    assert panel.role is Role.KPI_SET
    assert panel.decision.strategy is Strategy.STAT_CARDS
    [card] = panel.decision.cards
    assert card.label == "Total Sales"
    assert card.display == "1234.5678"


def test_retail_kpis_carry_currency_prefix(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"kpis": {"total_sales": 1234.5678, "orders": 12}}})

    displays = [card.display for card in view.panels[0].decision.cards]
    assert displays == ["₹1234.5678", "12"]


def test_sales_by_region_renders_pie(retail: DashboardEngine) -> None:
    payload = {
        "insights": {
            "totals": {
                "sales_by_region": [{"Region": "North", "Sales": 100}, {"Region": "South", "Sales": 200}],
            }
        }
    }

    view = retail.render(payload)

    [panel] = view.panels_for("totals")
    assert panel.key == "sales_by_region"
    assert panel.title == "Sales by Region"
    assert panel.decision.strategy in (Strategy.PIE, Strategy.BAR)
    assert panel.decision.label_key == "Region"
    assert panel.decision.value_key == "Sales"


def test_single_point_trend_is_placeholder(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"trends": [{"date": "2024-01-01", "total": 10}]}})

    [panel] = view.panels_for("trends")
    assert panel.decision.strategy is Strategy.PLACEHOLDER
    assert panel.decision.reason == NOT_ENOUGH_DATA
    assert not panel.decision.is_chart


# ---------------------------------------------------------------------------
# Section expansion and reshaping
# ---------------------------------------------------------------------------


def test_grouped_totals_expand_to_one_panel_per_child(retail: DashboardEngine) -> None:
    payload = {
        "insights": {
            "totals": {
                "sales_by_region": [{"Region": "North", "Sales": 100}],
                "sales_by_category": {"Category": ["Toys", "Books", "Games"], "Sales": [5, 7, 9]},
                "sales_over_time": [
                    {"Month": "Jan", "Sales": 10, "Profit": 1},
                    {"Month": "Feb", "Sales": 12, "Profit": 2},
                ],
            }
        }
    }

    view = retail.render(payload)

    panels = {panel.key: panel for panel in view.panels_for("totals")}
    assert list(panels) == ["sales_by_region", "sales_by_category", "sales_over_time"]
    assert panels["sales_by_category"].decision.strategy is Strategy.PIE
    assert panels["sales_by_category"].decision.label_key == "Category"
    assert panels["sales_by_category"].data == [
        {"Category": "Toys", "Sales": 5},
        {"Category": "Books", "Sales": 7},
        {"Category": "Games", "Sales": 9},
    ]
    assert panels["sales_over_time"].decision.strategy is Strategy.LINE
    assert panels["sales_over_time"].title == "Sales Over Time"


def test_kpis_with_nested_children_keep_scalars_as_one_panel(retail: DashboardEngine) -> None:
    payload = {
        "insights": {
            "kpis": {
                "total_sales": 1234.5,
                "orders": 10,
                "sales_by_month": {"Jan": 1, "Feb": 2},
            }
        }
    }

    view = retail.render(payload)

    scalars, by_month = view.panels_for("kpis")
    assert scalars.key == "kpis"
    assert scalars.title == "Key Performance Indicators"
    assert scalars.decision.strategy is Strategy.STAT_CARDS
    assert [card.display for card in scalars.decision.cards] == ["₹1234.5", "10"]
    assert by_month.key == "sales_by_month"
    assert by_month.decision.strategy is Strategy.STAT_CARDS
    assert all(panel.decision.reason != DISPATCH_MISS for panel in view.panels)


def test_value_key_hint_from_profile(healthcare: DashboardEngine) -> None:
    payload = {"insights": {"totals": {"cases_by_regions": [{"Cases": 4, "Beds": 10}, {"Cases": 6, "Beds": 12}]}}}

    view = healthcare.render(payload)

    decision = view.panels[0].decision
    assert decision.value_key == "Cases"
    assert decision.label_key == "Beds"


def test_finance_ranking_uses_amount_received(finance: DashboardEngine) -> None:
    payload = {
        "insights": {
            "highPerformers": {
                "top_Division": [
                    {"Division": "North", "Transactions": 12, "Total_Amount_Received": 5400},
                    {"Division": "South", "Transactions": 30, "Total_Amount_Received": 2100},
                ]
            }
        }
    }

    [panel] = finance.render(payload).panels

    assert panel.decision.strategy is Strategy.RANKED_BAR
    assert panel.decision.value_key == "Total_Amount_Received"


def test_finance_growth_rates_render_as_percentages(finance: DashboardEngine) -> None:
    payload = {
        "insights": {
            "kpis": {
                "total_revenue": 1000,
                "revenue_growth_rate_avg": 4.56789,
                "revenue_growth_rate_median": "3.1%",
            }
        }
    }

    [panel] = finance.render(payload).panels

    assert [card.display for card in panel.decision.cards] == ["$1000", "4.57%", "3.1%"]


def test_totals_scalar_map_renders_table(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"totals": {"total_sales": 100.5, "total_orders": 4}}})

    [panel] = view.panels
    assert panel.decision.strategy is Strategy.TABLE
    assert panel.title == "Totals"


def test_ranking_sections(retail: DashboardEngine) -> None:
    payload = {
        "insights": {
            "highPerformers": {
                "top_categories": [
                    {"Category": "Toys", "Sales": 900, "Share": 0.45},
                    {"Category": "Books", "Sales": 600, "Share": 0.3},
                ]
            },
            "lowPerformers": [{"Category": "Garden", "Sales": 20}],
        }
    }

    view = retail.render(payload)

    [high] = view.panels_for("highPerformers")
    [low] = view.panels_for("lowPerformers")
    assert high.decision.strategy is Strategy.RANKED_BAR
    assert high.title == "Top Categories"
    assert low.decision.strategy is Strategy.RANKED_BAR
    assert low.title == "Low Performers"


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


def test_fixed_window_trims_trend_before_dispatch(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"trends": _trend(10)}}, WindowSpec.fixed_days(7))

    [panel] = view.panels
    assert panel.decision.strategy is Strategy.AREA
    assert len(panel.data) == 7
    assert panel.data[0]["date"] == "2024-01-04"


def test_window_can_leave_too_few_points(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"trends": _trend(10)}}, WindowSpec.fixed_days(2))

    assert view.panels[0].decision.strategy is Strategy.PLACEHOLDER


def test_custom_window_on_labeled_series_uses_axis_key(retail: DashboardEngine) -> None:
    series = [
        {"day": "2024-01-01", "revenue": 1, "profit": 1},
        {"day": "2024-01-02", "revenue": 2, "profit": 1},
        {"day": "2024-01-03", "revenue": 3, "profit": 1},
        {"day": "2024-02-01", "revenue": 4, "profit": 1},
    ]

    view = retail.render({"insights": {"trends": series}}, WindowSpec.custom(end="2024-01-31"))

    panel = view.panels[0]
    assert [record["day"] for record in panel.data] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert panel.decision.value_key == "revenue"


def test_custom_window_with_no_matches_is_placeholder(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"trends": _trend(5)}}, WindowSpec.custom("2030-01-01", "2030-12-31"))

    assert view.panels[0].decision.strategy is Strategy.PLACEHOLDER


def test_windows_do_not_touch_non_trend_sections(retail: DashboardEngine) -> None:
    records = [{"Region": f"R{index}", "Sales": index + 1} for index in range(5)]

    view = retail.render({"insights": {"totals": records}}, WindowSpec.fixed_days(2))

    assert len(view.panels[0].data) == 5


# ---------------------------------------------------------------------------
# Ordering, narrative and unknown sections
# ---------------------------------------------------------------------------


def test_sections_follow_profile_order_then_unknown(retail: DashboardEngine) -> None:
    payload = {
        "insights": {
            "anomalies": {"spikes": {"Jan": [1, 2]}},
            "hypothesis": ["Promotions drove growth."],
            "kpis": {"total_sales": 1},
            "summary": "Strong quarter.",
        }
    }

    view = retail.render(payload)

    assert [panel.section for panel in view.panels] == ["kpis", "hypothesis", "summary", "anomalies"]
    hypothesis, summary, anomalies = view.panels[1:]
    assert hypothesis.decision.strategy is Strategy.BULLET_LIST
    assert summary.decision.strategy is Strategy.TEXT
    assert summary.decision.text == "Strong quarter."
    assert anomalies.role is Role.GENERIC
    assert anomalies.decision.reason is None


def test_summary_lead_in_is_dropped(retail: DashboardEngine) -> None:
    view = retail.render({"insights": {"summary": "Sure, here is your summary: Sales grew."}})

    [panel] = view.panels
    assert panel.decision.strategy is Strategy.TEXT
    assert panel.decision.text == "Sales grew."


def test_empty_payload_renders_nothing(retail: DashboardEngine) -> None:
    view = retail.render({"summary": None, "insights": None})

    assert view.panels == ()
    assert view.fields == ()


def test_render_never_mutates_payload(retail: DashboardEngine) -> None:
    payload = {"insights": {"trends": _trend(10), "totals": {"a": {"x": [1, 2], "y": ["p", "q"]}}}}
    original = copy.deepcopy(payload)

    retail.render(payload, WindowSpec.fixed_days(3))

    assert payload == original


def test_view_serializes(retail: DashboardEngine) -> None:
    view = retail.render(
        {
            "summary": {"Sales": {"type": "numeric", "min": 1, "max": 5}},
            "insights": {"kpis": {"total_sales": 3}},
        },
        WindowSpec.fixed_days(30),
    )

    payload = view.to_dict()

    assert payload["industry"] == "retail"
    assert payload["window"] == {"mode": "fixed_days", "days": 30, "start": None, "end": None}
    assert payload["panels"][0]["decision"]["strategy"] == "stat-cards"
    assert payload["fields"][0]["name"] == "Sales"
    assert payload["palette"][0] == "#7400B8"


def test_unknown_industry_profile() -> None:
    with pytest.raises(ConfigurationError):
        get_profile("aerospace")
