# utils.py
from __future__ import annotations

from datetime import time
from typing import Iterable, Optional

import pandas as pd

from domain import WorkDayEntry, YearSummary

CSV_COLUMNS = ["Month", "Total Hours", "Gross (€)", "Tax (€)", "Net (€)"]


def parse_hhmm(s: str) -> Optional[time]:
    """'HH:MM' (or 'HH:MM:SS') to time; None when it does not parse."""
    try:
        parts = [int(p) for p in s.strip().split(":")]
        if len(parts) == 2:
            return time(parts[0], parts[1])
        if len(parts) == 3:
            return time(parts[0], parts[1], parts[2])
    except (AttributeError, ValueError):
        pass
    return None


def time_options(step_min: int = 5) -> list[str]:
    opts = []
    for h in range(24):
        for m in range(0, 60, step_min):
            opts.append(f"{h:02d}:{m:02d}")
    return opts


def money(x: float, symbol: str = "€") -> str:
    return f"{symbol}{x:.2f}"


def format_hours(hours: float) -> str:
    return f"{hours:.2f} h"


def entries_to_dataframe(entries: Iterable[WorkDayEntry]) -> pd.DataFrame:
    rows = []
    for e in entries:
        rows.append({
            "Date": e.date,
            "Start": e.start,
            "End": e.end,
            "Hours": round(e.hours, 2),
        })
    return pd.DataFrame(rows, columns=["Date", "Start", "End", "Hours"])


def year_summary_to_dataframe(summary: YearSummary) -> pd.DataFrame:
    rows = [
        [m.month, float(m.total_hours), float(m.gross), float(m.tax), float(m.net)]
        for m in summary.months
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def yearly_csv(summary: YearSummary) -> str:
    """Comma separated yearly table, two decimals, no quoting."""
    df = year_summary_to_dataframe(summary)
    return df.to_csv(index=False, float_format="%.2f", lineterminator="\n")


def csv_filename(year) -> str:
    return f"ShiftMate_{year}.csv"
