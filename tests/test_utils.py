"""Tests for formatting helpers and the yearly CSV export."""

from datetime import time

import pytest

from domain import MonthSummary, RateConfig, WorkDayEntry, YearSummary
from repository import InMemoryRecordStore, dump_month_record
from services import PayCalculator
from utils import (
    CSV_COLUMNS,
    csv_filename,
    entries_to_dataframe,
    format_hours,
    money,
    parse_hhmm,
    time_options,
    year_summary_to_dataframe,
    yearly_csv,
)


@pytest.mark.parametrize(
    "raw,expected",
    [("09:00", time(9, 0)), (" 17:30 ", time(17, 30)), ("08:15:20", time(8, 15, 20))],
)
def test_parse_hhmm(raw, expected):
    assert parse_hhmm(raw) == expected


@pytest.mark.parametrize("raw", ["09:00G", "", "25:00", "9", None, "12:61"])
def test_parse_hhmm_invalid(raw):
    assert parse_hhmm(raw) is None


def test_time_options():
    opts = time_options(5)
    assert opts[0] == "00:00"
    assert opts[-1] == "23:55"
    assert len(opts) == 24 * 12


def test_money_and_hours():
    assert money(9.6) == "€9.60"
    assert money(86.4, "$") == "$86.40"
    assert format_hours(8) == "8.00 h"


def test_entries_to_dataframe():
    df = entries_to_dataframe([WorkDayEntry("2024-03-04", "09:00", "17:00", 8.0), WorkDayEntry()])
    assert list(df.columns) == ["Date", "Start", "End", "Hours"]
    assert df["Hours"].tolist() == [8.0, 0.0]


def test_entries_to_dataframe_empty():
    df = entries_to_dataframe([])
    assert df.empty
    assert list(df.columns) == ["Date", "Start", "End", "Hours"]


class TestYearlyCsv:
    def _year(self, months):
        return YearSummary(year=2024, months=months)

    def test_header(self):
        ys = self._year([MonthSummary(month=m) for m in range(1, 13)])
        lines = yearly_csv(ys).splitlines()
        assert lines[0] == "Month,Total Hours,Gross (€),Tax (€),Net (€)"
        assert lines[0].split(",") == CSV_COLUMNS
        assert len(lines) == 13

    def test_empty_year_rows_are_zero(self):
        ys = self._year([MonthSummary(month=m) for m in range(1, 13)])
        lines = yearly_csv(ys).splitlines()
        assert lines[1] == "1,0.00,0.00,0.00,0.00"
        assert lines[12] == "12,0.00,0.00,0.00,0.00"

    def test_one_month_of_eight_hours(self):
        store = InMemoryRecordStore({"2024-3": dump_month_record([WorkDayEntry(start="09:00", end="17:00", hours=8.0)])})
        ys = PayCalculator().yearly_summary(store, 2024, RateConfig(12, 10))
        lines = yearly_csv(ys).splitlines()
        assert "3,8.00,96.00,9.60,86.40" in lines
        assert lines[3] == "3,8.00,96.00,9.60,86.40"

    def test_no_quoting(self):
        assert '"' not in yearly_csv(self._year([MonthSummary(month=1, total_hours=1.005)]))

    def test_dataframe_columns(self):
        df = year_summary_to_dataframe(self._year([MonthSummary(month=1, total_hours=2, gross=24, tax=2.4, net=21.6)]))
        assert list(df.columns) == CSV_COLUMNS
        assert df.iloc[0]["Net (€)"] == pytest.approx(21.6)


def test_csv_filename():
    assert csv_filename(2024) == "ShiftMate_2024.csv"
