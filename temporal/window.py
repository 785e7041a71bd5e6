"""
temporal/window.py

Window specifications for slicing time series before charting.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class WindowMode(str, Enum):
    FIXED_DAYS = "fixed_days"
    ALL = "all"
    CUSTOM = "custom"


@dataclass(frozen=True)
class WindowSpec:
    """
    A user-selected temporal range.

    ``days`` is only meaningful for ``FIXED_DAYS``; ``start`` and ``end`` only
    for ``CUSTOM``. Bounds are kept as supplied and normalized when the window
    is applied.
    """

    mode: WindowMode = WindowMode.ALL
    days: int | None = None
    start: Any = None
    end: Any = None

    def __post_init__(self) -> None:
        if self.mode is WindowMode.FIXED_DAYS:
            if isinstance(self.days, bool) or not isinstance(self.days, int):
                raise ValueError("Fixed-day windows need an integer day count.")
            if self.days < 0:
                raise ValueError(f"Fixed-day window cannot be negative (got {self.days}).")

    @classmethod
    def all(cls) -> "WindowSpec":
        return cls(mode=WindowMode.ALL)

    @classmethod
    def fixed_days(cls, days: int) -> "WindowSpec":
        return cls(mode=WindowMode.FIXED_DAYS, days=days)

    @classmethod
    def custom(cls, start: Any = None, end: Any = None) -> "WindowSpec":
        return cls(mode=WindowMode.CUSTOM, start=start, end=end)

    @classmethod
    def parse(cls, token: str | int | None, start: Any = None, end: Any = None) -> "WindowSpec":
        """
        Build a spec from a UI dropdown value.

        Accepts ``"all"``, ``"custom"`` and day counts such as ``"7"``,
        ``"30d"`` or ``90``. A missing token means ``all``.

        Raises
        ------
        ValueError
            If the token is not recognised.
        """
        if token is None:
            return cls.all()
        if isinstance(token, int) and not isinstance(token, bool):
            return cls.fixed_days(token)

        text = str(token).strip().lower()
        if text in ("", "all"):
            return cls.all()
        if text == "custom":
            return cls.custom(start=start, end=end)

        digits = text[:-1] if text.endswith("d") else text
        if digits.isdigit():
            return cls.fixed_days(int(digits))
        raise ValueError(f"Unrecognised window '{token}'. Use a day count, 'all' or 'custom'.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "days": self.days,
            "start": None if self.start is None else str(self.start),
            "end": None if self.end is None else str(self.end),
        }
