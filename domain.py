# domain.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List

ENTRY_FIELDS = ("date", "start", "end")


def period_key(year: int, month: int) -> str:
    """Storage key for a (year, month) period, e.g. '2024-3'."""
    return f"{year}-{month}"


@dataclass
class WorkDayEntry:
    """Represents a single work day entry."""
    date: str = ""
    start: str = ""
    end: str = ""
    hours: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RateConfig:
    hourly_rate: float = 12.0
    tax_rate: float = 10.0


@dataclass(frozen=True)
class MonthSummary:
    month: int
    total_hours: float = 0.0
    gross: float = 0.0
    tax: float = 0.0
    net: float = 0.0


@dataclass
class YearSummary:
    """Twelve monthly summaries for one year plus their grand totals."""
    year: int
    months: List[MonthSummary] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return sum(m.total_hours for m in self.months)

    @property
    def gross(self) -> float:
        return sum(m.gross for m in self.months)

    @property
    def tax(self) -> float:
        return sum(m.tax for m in self.months)

    @property
    def net(self) -> float:
        return sum(m.net for m in self.months)
