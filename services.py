# services.py
from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, date
from typing import Iterable, List, Optional, Set

from domain import ENTRY_FIELDS, MonthSummary, RateConfig, WorkDayEntry, YearSummary, period_key
from repository import RecordParseError, RecordStore, dump_month_record, parse_month_record
from utils import parse_hhmm

logger = logging.getLogger(__name__)

# Both times are placed on this date, so only same-day shifts are measured.
REFERENCE_DATE = date(2000, 1, 1)


class PayCalculator:
    """Business rules for worked hours, pay and tax."""

    def calculate_hours(self, start: str, end: str) -> float:
        """Returns worked hours between two 'HH:MM' times. Never negative; overnight counts as 0."""
        t0 = parse_hhmm(start)
        t1 = parse_hhmm(end)
        if t0 is None or t1 is None:
            logger.warning("Cannot parse shift times start=%r end=%r; counting 0 h", start, end)
            return 0.0
        diff = (datetime.combine(REFERENCE_DATE, t1) - datetime.combine(REFERENCE_DATE, t0)).total_seconds() / 3600.0
        return diff if diff > 0 else 0.0

    def total_hours(self, entries: Iterable[WorkDayEntry]) -> float:
        return sum((e.hours for e in entries), 0.0)

    def summarize(self, entries: Iterable[WorkDayEntry], rates: RateConfig, month: int = 0) -> MonthSummary:
        """Totals for one month. No rounding here; format at display time."""
        hours = self.total_hours(entries)
        gross = hours * rates.hourly_rate
        tax = gross * rates.tax_rate / 100
        return MonthSummary(month=month, total_hours=hours, gross=gross, tax=tax, net=gross - tax)

    def yearly_summary(self, store: RecordStore, year: int, rates: RateConfig) -> YearSummary:
        """
        Reads the twelve month records of `year` and summarizes each with the
        given (current) rates. Missing or unreadable months count as zero.
        """
        months: List[MonthSummary] = []
        for m in range(1, 13):
            key = period_key(year, m)
            raw = store.get(key)
            if raw is None:
                months.append(MonthSummary(month=m))
                continue
            try:
                entries = parse_month_record(raw)
            except RecordParseError as e:
                logger.warning("Ignoring unreadable record %s in yearly summary: %s", key, e)
                months.append(MonthSummary(month=m))
                continue
            months.append(self.summarize(entries, rates, month=m))
        return YearSummary(year=year, months=months)


def coerce_rate(value) -> Optional[float]:
    """Returns `value` as a float, or None when it is not a usable number."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value.strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class TimesheetSession:
    """
    Entries of the selected (year, month) plus the rate configuration.
    Every mutation overwrites the stored record for the current period.
    """

    def __init__(
        self,
        store: RecordStore,
        year: int,
        month: int,
        rates: Optional[RateConfig] = None,
        calculator: Optional[PayCalculator] = None,
    ):
        self.store = store
        self.calculator = calculator or PayCalculator()
        self.rates = rates or RateConfig()
        self.year = year
        self.month = month
        self.entries: List[WorkDayEntry] = []
        self.invalid_inputs: Set[str] = set()
        self.load_warning: Optional[str] = None
        self.show_yearly = False
        self._load()

    @property
    def key(self) -> str:
        return period_key(self.year, self.month)

    # ---- period selector ----

    def select_period(self, year: int, month: int) -> bool:
        """Switches to another period, reloading its record. Returns True if the period changed."""
        if period_key(year, month) == self.key:
            return False
        self.year = year
        self.month = month
        self._load()
        return True

    def _load(self) -> None:
        self.load_warning = None
        raw = self.store.get(self.key)
        if raw is None:
            self.entries = []
            return
        try:
            self.entries = parse_month_record(raw)
        except RecordParseError as e:
            logger.warning("Stored record %s is unreadable, starting empty: %s", self.key, e)
            self.load_warning = f"Saved data for {self.key} could not be read and was ignored."
            self.entries = []

    def _save(self) -> None:
        self.store.put(self.key, dump_month_record(self.entries))

    # ---- rate configuration ----

    def set_hourly_rate(self, value) -> bool:
        return self._set_rate("hourly_rate", value)

    def set_tax_rate(self, value) -> bool:
        return self._set_rate("tax_rate", value)

    def _set_rate(self, name: str, value) -> bool:
        number = coerce_rate(value)
        if number is None:
            logger.warning("Rejected %s input %r; keeping %s", name, value, getattr(self.rates, name))
            self.invalid_inputs.add(name)
            return False
        self.invalid_inputs.discard(name)
        if name == "hourly_rate":
            self.rates = RateConfig(hourly_rate=number, tax_rate=self.rates.tax_rate)
        else:
            self.rates = RateConfig(hourly_rate=self.rates.hourly_rate, tax_rate=number)
        return True

    # ---- entry list ----

    def _valid_index(self, index: int, action: str) -> bool:
        if 0 <= index < len(self.entries):
            return True
        logger.warning("Cannot %s entry %s: %s has %d entries", action, index, self.key, len(self.entries))
        return False

    def add_entry(self) -> WorkDayEntry:
        entry = WorkDayEntry()
        self.entries = [*self.entries, entry]
        self._save()
        return entry

    def update_entry(self, index: int, field: str, value: str) -> bool:
        if field not in ENTRY_FIELDS:
            raise ValueError(f"Unknown entry field: {field!r}")
        if not self._valid_index(index, "update"):
            return False
        entry = replace(self.entries[index], **{field: value or ""})
        if entry.start and entry.end:
            entry = replace(entry, hours=self.calculator.calculate_hours(entry.start, entry.end))
        entries = list(self.entries)
        entries[index] = entry
        self.entries = entries
        self._save()
        return True

    def delete_entry(self, index: int) -> bool:
        if not self._valid_index(index, "delete"):
            return False
        self.entries = [e for i, e in enumerate(self.entries) if i != index]
        self._save()
        return True

    # ---- derived values ----

    def summary(self) -> MonthSummary:
        return self.calculator.summarize(self.entries, self.rates, month=self.month)

    def yearly_summary(self) -> YearSummary:
        return self.calculator.yearly_summary(self.store, self.year, self.rates)

    def saved_months(self) -> List[int]:
        """Months of the selected year that have a stored record."""
        prefix = f"{self.year}-"
        months = []
        for key in self.store.keys():
            rest = key[len(prefix):]
            if key.startswith(prefix) and rest.isdigit():
                months.append(int(rest))
        return sorted(months)

    # ---- view mode ----

    def toggle_view(self) -> bool:
        self.show_yearly = not self.show_yearly
        return self.show_yearly

    @property
    def view_label(self) -> str:
        return "Back to Month" if self.show_yearly else "View Yearly Summary"
