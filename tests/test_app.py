"""Smoke tests for the Streamlit UI."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from config import get_settings

APP_PATH = Path(__file__).resolve().parent.parent / "app.py"


@pytest.fixture
def app(monkeypatch, tmp_path):
    for name in ("RENDER", "SPACE_ID", "STREAMLIT_RUNTIME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{(tmp_path / 'app.db').as_posix()}")
    get_settings.cache_clear()
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.run()
    yield at
    get_settings.cache_clear()


def test_renders_monthly_view(app):
    assert not app.exception
    assert app.button(key="toggle_view").label == "View Yearly Summary"
    assert any("Total Hours" in m.value for m in app.markdown)


def test_add_and_edit_work_day(app):
    app.button(key="add_entry").click().run()
    ts = app.session_state["timesheet"]
    assert len(ts.entries) == 1

    app.selectbox(key="start_0_0").set_value("09:00").run()
    app.selectbox(key="end_0_0").set_value("17:00").run()
    assert not app.exception
    ts = app.session_state["timesheet"]
    assert ts.entries[0].hours == pytest.approx(8.0)
    assert any("€96.00" in m.value for m in app.markdown)


def test_delete_work_day(app):
    app.button(key="add_entry").click().run()
    app.button(key="del_0_0").click().run()
    assert app.session_state["timesheet"].entries == []


def test_invalid_rate_shows_warning(app):
    app.text_input(key="hourly_rate_input").input("abc").run()
    assert not app.exception
    assert any("not a number" in w.value for w in app.warning)
    assert app.session_state["timesheet"].rates.hourly_rate == 12.0


def test_toggle_yearly_view(app):
    app.button(key="toggle_view").click().run()
    assert not app.exception
    assert app.button(key="toggle_view").label == "Back to Month"
    assert any("Yearly Gross" in m.value for m in app.markdown)


def test_minute_precision_times(app):
    app.button(key="add_entry").click().run()
    app.selectbox(key="start_0_0").set_value("09:07").run()
    app.selectbox(key="end_0_0").set_value("17:00").run()
    assert not app.exception
    assert app.session_state["timesheet"].entries[0].hours == pytest.approx(7 + 53 / 60)


def test_saved_months_caption(app):
    app.button(key="add_entry").click().run()
    ts = app.session_state["timesheet"]
    assert any(f"Saved months in {ts.year}: {ts.month}" in c.value for c in app.caption)
