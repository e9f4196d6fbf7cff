# app.py
# -----------------------------------------------
# ⏱️ ShiftMate: timesheet and pay calculator (Streamlit)
# -----------------------------------------------
# Requires: streamlit, sqlmodel, pandas, reportlab, python-dotenv
# (psycopg2-binary when DATABASE_URL points at Postgres).
# Entries are saved per "<year>-<month>" on every change.

import logging
from datetime import date

import streamlit as st

from config import get_settings, is_hosted
from domain import RateConfig
from repository import MonthRecordRepository
from reports import month_report_pdf, pdf_filename
from services import TimesheetSession
from utils import (
    csv_filename,
    format_hours,
    money,
    time_options,
    year_summary_to_dataframe,
    yearly_csv,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("shiftmate")

APP_TITLE = "ShiftMate"
CUR = settings.currency_symbol
TIME_OPTIONS = [""] + time_options(1)

# =========================
# Page setup + header
# =========================
st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="centered")

st.markdown("""
<style>
.app-header {
  font-weight: 700;
  font-size: 1.8rem;
  text-align: center;
  color: #2563eb;
  margin: 0.2rem 0 0.8rem 0;
}
</style>
""", unsafe_allow_html=True)
st.markdown(f'<div class="app-header">{APP_TITLE}</div>', unsafe_allow_html=True)

# Hosted deployments need a real database
if is_hosted() and settings.uses_sqlite:
    st.error("DATABASE_URL (Postgres) is missing. Set it in the hosting environment.")


@st.cache_resource
def get_repo(url: str):
    return MonthRecordRepository(url, echo=False)


repo = get_repo(settings.database_url)

# =========================
# State helpers
# =========================
def get_session() -> TimesheetSession:
    if "timesheet" not in st.session_state:
        today = date.today()
        st.session_state["timesheet"] = TimesheetSession(
            repo, today.year, today.month,
            rates=RateConfig(settings.default_hourly_rate, settings.default_tax_rate),
        )
        st.session_state["rows_rev"] = 0
    return st.session_state["timesheet"]


def _bump_rows_rev():
    # Row widgets are keyed by revision so shifted indices never inherit stale values
    st.session_state["rows_rev"] = st.session_state.get("rows_rev", 0) + 1


def _seed(key: str, value):
    if key not in st.session_state:
        st.session_state[key] = value


def _as_date(s: str):
    try:
        return date.fromisoformat(s) if s else None
    except ValueError:
        return None


def _on_add():
    get_session().add_entry()


def _on_delete(index: int):
    get_session().delete_entry(index)
    _bump_rows_rev()


def _on_edit(index: int, field: str, widget_key: str):
    value = st.session_state.get(widget_key)
    if isinstance(value, date):
        value = value.isoformat()
    get_session().update_entry(index, field, value or "")


def _on_toggle():
    get_session().toggle_view()


ts = get_session()

# =========================
# Period + rates
# =========================
_seed("year_input", ts.year)
_seed("month_input", ts.month)
_seed("hourly_rate_input", f"{ts.rates.hourly_rate:g}")
_seed("tax_rate_input", f"{ts.rates.tax_rate:g}")

c_year, c_month, c_rate, c_tax = st.columns(4)
year = c_year.number_input("Year", step=1, format="%d", key="year_input")
month = c_month.number_input("Month", step=1, format="%d", key="month_input")
rate_raw = c_rate.text_input(f"Hourly Rate ({CUR})", key="hourly_rate_input")
tax_raw = c_tax.text_input("Tax Rate (%)", key="tax_rate_input")

if ts.select_period(int(year), int(month)):
    _bump_rows_rev()
if ts.load_warning:
    st.warning(ts.load_warning)

if not ts.set_hourly_rate(rate_raw):
    st.warning(f"Hourly rate '{rate_raw}' is not a number; using {ts.rates.hourly_rate:g}.")
if not ts.set_tax_rate(tax_raw):
    st.warning(f"Tax rate '{tax_raw}' is not a number; using {ts.rates.tax_rate:g}.")

saved = ts.saved_months()
if saved:
    st.caption(f"Saved months in {ts.year}: " + ", ".join(str(m) for m in saved))

b_add, b_toggle = st.columns(2)
b_add.button("+ Add Work Day", key="add_entry", on_click=_on_add, use_container_width=True)
b_toggle.button(ts.view_label, key="toggle_view", on_click=_on_toggle, use_container_width=True)

# =========================
# 🗓️ Monthly view
# =========================
if not ts.show_yearly:
    rev = st.session_state.get("rows_rev", 0)
    if not ts.entries:
        st.info("No work days recorded for this month.")
    else:
        h_date, h_start, h_end, h_hours, h_act = st.columns([3, 2, 2, 1.5, 1])
        h_date.markdown("**Date**")
        h_start.markdown("**Start**")
        h_end.markdown("**End**")
        h_hours.markdown("**Hours**")
        h_act.markdown("**Action**")

    for i, day in enumerate(ts.entries):
        c_date, c_start, c_end, c_hours, c_act = st.columns([3, 2, 2, 1.5, 1])
        k_date, k_start, k_end = (f"{f}_{rev}_{i}" for f in ("date", "start", "end"))
        _seed(k_date, _as_date(day.date))
        _seed(k_start, day.start)
        _seed(k_end, day.end)

        c_date.date_input(
            "Date", key=k_date, format="YYYY-MM-DD", label_visibility="collapsed",
            on_change=_on_edit, args=(i, "date", k_date),
        )
        for col, field, key, value in ((c_start, "start", k_start, day.start), (c_end, "end", k_end, day.end)):
            options = TIME_OPTIONS if value in TIME_OPTIONS else sorted(TIME_OPTIONS + [value])
            col.selectbox(
                field.capitalize(), options=options, key=key, label_visibility="collapsed",
                on_change=_on_edit, args=(i, field, key),
            )
        c_hours.markdown(f"{day.hours:.2f}")
        c_act.button("✕", key=f"del_{rev}_{i}", on_click=_on_delete, args=(i,))

    s = ts.summary()
    with st.container(border=True):
        st.markdown(f"Total Hours: **{format_hours(s.total_hours)}**")
        st.markdown(f"Gross Salary: **{money(s.gross, CUR)}**")
        st.markdown(f"Tax ({ts.rates.tax_rate:g}%): **-{money(s.tax, CUR)}**")
        st.markdown(f"Net Salary: **:green[{money(s.net, CUR)}]**")

    st.download_button(
        "Download month (PDF)",
        data=month_report_pdf(ts.entries, s, ts.year, ts.month, ts.rates, currency=CUR),
        file_name=pdf_filename(ts.year, ts.month),
        mime="application/pdf",
        use_container_width=True,
    )

# =========================
# 📅 Yearly view
# =========================
else:
    ys = ts.yearly_summary()
    df = year_summary_to_dataframe(ys)
    st.dataframe(
        df,
        hide_index=True,
        use_container_width=True,
        column_config={
            col: st.column_config.NumberColumn(format="%.2f")
            for col in df.columns if col != "Month"
        },
    )

    with st.container(border=True):
        st.markdown(f"Yearly Total Hours: **{format_hours(ys.total_hours)}**")
        st.markdown(f"Yearly Gross: **{money(ys.gross, CUR)}**")
        st.markdown(f"Yearly Tax: **-{money(ys.tax, CUR)}**")
        st.markdown(f"Yearly Net: **:green[{money(ys.net, CUR)}]**")

    st.download_button(
        "Export Yearly Data (CSV)",
        data=yearly_csv(ys),
        file_name=csv_filename(ts.year),
        mime="text/csv",
        use_container_width=True,
    )
