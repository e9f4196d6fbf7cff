"""Pytest fixtures for ShiftMate tests."""

from __future__ import annotations

import pytest

from domain import RateConfig, WorkDayEntry
from repository import InMemoryRecordStore, MonthRecordRepository, dump_month_record
from services import PayCalculator, TimesheetSession


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def sql_repo(tmp_path) -> MonthRecordRepository:
    return MonthRecordRepository(f"sqlite:///{(tmp_path / 'test.db').as_posix()}")


@pytest.fixture
def calculator() -> PayCalculator:
    return PayCalculator()


@pytest.fixture
def rates() -> RateConfig:
    return RateConfig(hourly_rate=12, tax_rate=10)


@pytest.fixture
def session(store, rates) -> TimesheetSession:
    return TimesheetSession(store, 2024, 3, rates=rates)


@pytest.fixture
def eight_hour_day() -> WorkDayEntry:
    return WorkDayEntry(date="2024-03-04", start="09:00", end="17:00", hours=8.0)


@pytest.fixture
def seeded_store(eight_hour_day) -> InMemoryRecordStore:
    """Store with one 8 h day in March 2024."""
    return InMemoryRecordStore({"2024-3": dump_month_record([eight_hour_day])})
