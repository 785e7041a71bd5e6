"""
tests/test_window_filter.py

Pytest unit tests for WindowSpec, normalize_date and TemporalWindowFilter.

All inputs are in-memory series; no clock is consulted, so every result is
deterministic.
"""

from __future__ import annotations

import copy
import warnings
from datetime import date, datetime, timedelta, timezone

import pytest

from temporal.filter import TemporalWindowFilter, apply_window, normalize_date
from temporal.window import WindowMode, WindowSpec


def _series(days: int) -> list[dict]:
    start = date(2024, 1, 1)
    return [{"date": (start + timedelta(days=offset)).isoformat(), "total": offset} for offset in range(days)]


# ---------------------------------------------------------------------------
# WindowSpec
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("token", "mode", "days"),
    [
        (None, WindowMode.ALL, None),
        ("all", WindowMode.ALL, None),
        ("", WindowMode.ALL, None),
        ("7", WindowMode.FIXED_DAYS, 7),
        ("30d", WindowMode.FIXED_DAYS, 30),
        (90, WindowMode.FIXED_DAYS, 90),
        ("custom", WindowMode.CUSTOM, None),
    ],
)
def test_parse_dropdown_tokens(token, mode, days) -> None:
    spec = WindowSpec.parse(token)

    assert spec.mode is mode
    assert spec.days == days


def test_parse_custom_keeps_bounds() -> None:
    spec = WindowSpec.parse("custom", start="2024-01-01", end="2024-01-31")

    assert spec.start == "2024-01-01"
    assert spec.end == "2024-01-31"


def test_parse_rejects_unknown_token() -> None:
    with pytest.raises(ValueError):
        WindowSpec.parse("fortnight")


def test_negative_day_count_is_rejected() -> None:
    with pytest.raises(ValueError):
        WindowSpec.fixed_days(-1)


# ---------------------------------------------------------------------------
# normalize_date
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-03-05", "2024-03-05"),
        ("2024-03-05T10:30:00", "2024-03-05"),
        ("2024-03-05T23:30:00-05:00", "2024-03-05"),
        ("03/05/2024", "2024-03-05"),
        ("01/13/2024", "2024-01-13"),
        ("3/5/24", "2024-03-05"),
        ("March 5, 2024", "2024-03-05"),
        (date(2024, 3, 5), "2024-03-05"),
        (datetime(2024, 3, 5, 23, 59, tzinfo=timezone.utc), "2024-03-05"),
        (1709596800000, "2024-03-05"),
    ],
)
def test_normalize_valid_dates(raw, expected) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "not a date", True, float("nan"), {"d": 1}, "13/01/2024", "02/30/2024"],
)
def test_normalize_invalid_dates(raw) -> None:
    assert normalize_date(raw) is None


@pytest.mark.parametrize("raw", ["today", "Now", " Tomorrow ", "yesterday"])
def test_clock_relative_words_are_not_dates(raw) -> None:
    assert normalize_date(raw) is None


def test_slash_dates_parse_without_warnings() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")

        assert normalize_date("13/01/2024") is None
        assert normalize_date("12/31/2024") == "2024-12-31"


# ---------------------------------------------------------------------------
# apply_window
# ---------------------------------------------------------------------------


def test_all_returns_series_unchanged() -> None:
    series = _series(5)

    assert apply_window(series, WindowSpec.all()) == series


def test_fixed_days_keeps_last_n_records_in_order() -> None:
    series = _series(10)

    result = apply_window(series, WindowSpec.fixed_days(3))

    assert [record["total"] for record in result] == [7, 8, 9]


def test_fixed_days_longer_than_series_returns_everything() -> None:
    series = _series(4)

    assert apply_window(series, WindowSpec.fixed_days(30)) == series


def test_fixed_zero_days_returns_nothing() -> None:
    assert apply_window(_series(4), WindowSpec.fixed_days(0)) == []


def test_custom_bounds_are_inclusive_and_drop_invalid_dates() -> None:
    series = _series(10) + [{"date": "garbage", "total": 99}, {"total": 100}]

    result = apply_window(series, WindowSpec.custom("2024-01-03", "2024-01-05"))

    assert [record["date"] for record in result] == ["2024-01-03", "2024-01-04", "2024-01-05"]


def test_custom_with_only_start() -> None:
    result = apply_window(_series(5), WindowSpec.custom(start="2024-01-04"))

    assert [record["total"] for record in result] == [3, 4]


def test_custom_without_bounds_behaves_like_all() -> None:
    series = _series(3)

    assert apply_window(series, WindowSpec.custom()) == series


def test_unparseable_bound_is_ignored() -> None:
    result = apply_window(_series(5), WindowSpec.custom(start="whenever", end="2024-01-02"))

    assert [record["total"] for record in result] == [0, 1]


def test_custom_window_uses_date_key() -> None:
    series = [{"day": "2024-01-01", "v": 1}, {"day": "2024-02-01", "v": 2}]

    result = TemporalWindowFilter().apply(series, WindowSpec.custom(end="2024-01-15"), date_key="day")

    assert result == [{"day": "2024-01-01", "v": 1}]


def test_custom_window_never_reorders() -> None:
    series = [{"date": "2024-01-03"}, {"date": "2024-01-01"}, {"date": "2024-01-02"}]

    result = apply_window(series, WindowSpec.custom("2024-01-01", "2024-01-03"))

    assert result == series


@pytest.mark.parametrize(
    "spec",
    [WindowSpec.all(), WindowSpec.fixed_days(3), WindowSpec.custom("2024-01-02", "2024-01-06")],
)
def test_window_is_idempotent_and_never_grows(spec: WindowSpec) -> None:
    series = _series(8)
    original = copy.deepcopy(series)

    once = apply_window(series, spec)
    twice = apply_window(once, spec)

    assert once == twice
    assert len(once) <= len(series)
    assert series == original
