"""
temporal/filter.py

Date normalization and window filtering for time-series records.

The filter only slices and filters. It never sorts: series arrive in
chronological order from the analysis service and keep that order.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

import pandas as pd

from app.failure_codes import INVALID_DATE
from temporal.window import WindowMode, WindowSpec

logger = logging.getLogger(__name__)

DEFAULT_DATE_KEY = "date"

# Words pandas resolves against the current clock.
_RELATIVE_DATE_WORDS = frozenset({"now", "today", "yesterday", "tomorrow"})

_SLASH_DATE = re.compile(r"^\d{1,2}/\d{1,2}/(\d{4}|\d{2})$")


def normalize_date(raw: Any) -> str | None:
    """
    Normalize *raw* to a ``YYYY-MM-DD`` calendar date.

    Strings go through ``pandas.to_datetime``. Slash dates are strictly
    month-first, so ``13/01/2024`` is rejected rather than read day-first.
    Relative words such as ``today`` or ``now`` are rejected because they
    depend on the clock. Numbers are epoch milliseconds. ``date``/``datetime``
    values are taken as-is. Timezone-aware values keep the calendar date they
    were written in.

    Returns
    -------
    str | None
        The canonical date, or ``None`` when *raw* cannot be placed on a time
        axis.
    """
    if raw is None or isinstance(raw, bool):
        return None

    try:
        if isinstance(raw, (int, float)):
            if not math.isfinite(raw):
                return None
            parsed = pd.to_datetime(raw, unit="ms", errors="coerce")
        elif isinstance(raw, str):
            text = raw.strip()
            if not text:
                return None
            if text.lower() in _RELATIVE_DATE_WORDS:
                return None
            slash = _SLASH_DATE.match(text)
            if slash is not None:
                layout = "%m/%d/%Y" if len(slash.group(1)) == 4 else "%m/%d/%y"
                parsed = pd.to_datetime(text, format=layout, errors="coerce")
            else:
                parsed = pd.to_datetime(text, errors="coerce")
        elif isinstance(raw, (pd.Timestamp, datetime, date)):
            parsed = pd.Timestamp(raw)
        else:
            return None
    except (ValueError, TypeError, OverflowError, pd.errors.OutOfBoundsDatetime):
        return None

    if parsed is None or pd.isna(parsed):
        return None
    return parsed.strftime("%Y-%m-%d")


class TemporalWindowFilter:
    """
    Reduces a chronologically ordered series to the records a window selects.

    Usage::

        window_filter = TemporalWindowFilter()
        recent = window_filter.apply(trends, WindowSpec.fixed_days(30))
    """

    def apply(
        self,
        series: Sequence[Any],
        spec: WindowSpec,
        *,
        date_key: str = DEFAULT_DATE_KEY,
    ) -> list[Any]:
        """
        Apply *spec* to *series* and return the selected records in order.

        * ``FIXED_DAYS(n)`` keeps the last ``min(n, len(series))`` records.
        * ``ALL`` keeps everything.
        * ``CUSTOM(start, end)`` keeps records whose normalized ``date_key``
          falls within the inclusive bounds; records without a valid date are
          dropped. Without bounds it behaves like ``ALL``.

        The input is never mutated and the output is never longer than it.
        """
        records = list(series)

        if spec.mode is WindowMode.ALL:
            return records

        if spec.mode is WindowMode.FIXED_DAYS:
            days = spec.days or 0
            return records[-days:] if days > 0 else []

        start = self._bound(spec.start, "start")
        end = self._bound(spec.end, "end")
        if start is None and end is None:
            return records

        selected: list[Any] = []
        dropped = 0
        for record in records:
            raw = record.get(date_key) if isinstance(record, Mapping) else None
            normalized = normalize_date(raw)
            if normalized is None:
                dropped += 1
                continue
            if start is not None and normalized < start:
                continue
            if end is not None and normalized > end:
                continue
            selected.append(record)

        if dropped:
            logger.debug("Dropped %d record(s) on '%s' (%s)", dropped, date_key, INVALID_DATE)
        logger.debug(
            "Custom window start=%s end=%s kept=%d of %d",
            start,
            end,
            len(selected),
            len(records),
        )
        return selected

    @staticmethod
    def _bound(raw: Any, name: str) -> str | None:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None
        normalized = normalize_date(raw)
        if normalized is None:
            logger.warning("Ignoring unparseable custom window %s bound: %r", name, raw)
        return normalized


_DEFAULT_FILTER = TemporalWindowFilter()


def apply_window(series: Sequence[Any], spec: WindowSpec, *, date_key: str = DEFAULT_DATE_KEY) -> list[Any]:
    """Apply *spec* to *series* with a shared stateless filter."""
    return _DEFAULT_FILTER.apply(series, spec, date_key=date_key)
