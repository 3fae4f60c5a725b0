# app.py
# -----------------------------------------------
# ⏱️ Work timer (Streamlit)
# -----------------------------------------------
# Requires: streamlit, sqlmodel, pandas, reportlab (psycopg2-binary if you use Postgres)
# Clock-in/out per day, net hours after breaks, monthly dashboard and live countdown.

import logging
from datetime import date, time

import streamlit as st

import config
from domain import DayType, Settings, WorkRecord, DEFAULT_SETTINGS
from repository import TWELVE_HOUR_KEY, WorkRecordRepository
from services import compute_dashboard, compute_status
from utils import (
    countdown_message,
    dataframe_to_pdf,
    deficit_label,
    format_clock,
    format_hours,
    hhmm_to_time,
    month_log,
    month_summary_lines,
    now_minutes,
    records_to_dataframe,
)

config.setup_logging()
logger = logging.getLogger(__name__)

TZ = config.app_timezone()
DATA_DIR = config.pick_data_dir()
DB_URL = config.database_url(DATA_DIR)

TITLE_APP = "Work timer"
st.set_page_config(page_title=TITLE_APP, page_icon="⏱️", layout="wide")


@st.cache_resource
def get_repo(url: str) -> WorkRecordRepository:
    logger.info("Opening store (data dir: %s)", DATA_DIR)
    return WorkRecordRepository(url, echo=False)


repo = get_repo(DB_URL)


@st.cache_data
def cached_dashboard(records: tuple[WorkRecord, ...], settings: Settings, reference_date: date):
    return compute_dashboard(records, settings, reference_date)


def time_field(label: str, key: str, current: str, fallback: str) -> str:
    value = hhmm_to_time(current) or hhmm_to_time(fallback)
    picked = st.time_input(label, value=value, key=key, step=300)
    return picked.strftime("%H:%M") if picked else current


# =========================
# Page
# =========================
st.title(f"⏱️ {TITLE_APP}")

settings = repo.load_settings()
records = tuple(repo.list_records())
today = config.today_local(TZ)
month_key = f"{today.year:04d}-{today.month:02d}"

left, right = st.columns([2, 1])

# =========================
# 🕒 Live clock
# =========================
with left:
    # Read once per full run; the toggle below reruns the page
    twelve = bool(repo.get_preference(TWELVE_HOUR_KEY, False))

    @st.fragment(run_every=1)
    def live_clock(twelve_hour: bool):
        now = config.now_local(TZ)
        status = compute_status(now_minutes(now), settings.required_start, settings.required_end)
        st.metric("Current time", format_clock(now, twelve_hour))
        st.caption(countdown_message(status))

    live_clock(twelve)

    if st.button(f"Switch to {'24' if twelve else '12'}-hour clock"):
        repo.set_preference(TWELVE_HOUR_KEY, not twelve)
        st.rerun()

    # =========================
    # 📊 Dashboard (current month)
    # =========================
    st.subheader("📊 This month")
    stats = cached_dashboard(records, settings, today)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Worked days", stats.total_worked_days)
    c2.metric("Average / day", f"{format_hours(stats.avg_daily_hours)} H")
    c3.metric("Overtime", f"{format_hours(stats.total_overtime_hours)} H")
    c4.metric("Weekend overtime", f"{format_hours(stats.weekend_overtime_hours)} H")
    c5.metric("Balance", deficit_label(stats))

    # =========================
    # ➕ Add / replace record
    # =========================
    st.subheader("➕ Clock record")
    st.caption("A second entry for the same date replaces the first.")
    with st.form("add_record"):
        rec_date = st.date_input("Date", value=today)
        rec_start = st.time_input("Start", value=time(9, 0), step=300)
        rec_end = st.time_input("End", value=time(17, 30), step=300)
        rec_type = st.radio(
            "Day type",
            options=[DayType.NORMAL, DayType.OVERTIME],
            format_func=lambda t: "Workday" if t == DayType.NORMAL else "Holiday / overtime",
            horizontal=True,
        )
        submitted = st.form_submit_button("Save record", use_container_width=True)

    if submitted:
        if not rec_date or not rec_start or not rec_end:
            st.warning("Fill in the date and both times.")
        else:
            saved = repo.upsert_record(
                rec_date.isoformat(), rec_start.strftime("%H:%M"), rec_end.strftime("%H:%M"), rec_type
            )
            st.toast(f"Saved {saved.date}", icon="✅")
            st.rerun()

    # =========================
    # 🗓️ Records
    # =========================
    st.subheader("🗓️ Records (this month)")
    month_df = month_log(records_to_dataframe(records, settings), month_key)
    if month_df.empty:
        st.info("No records this month.")
    else:
        pending = st.session_state.get("_pending_delete")
        for _, row in month_df.iterrows():
            cols = st.columns([2, 1, 1, 1, 2, 1, 1])
            cols[0].write(row["Date"])
            cols[1].write(row["Day"])
            cols[2].write(row["Start"])
            cols[3].write(row["End"])
            cols[4].write(row["Type"])
            cols[5].write(f"{row['Net hours']:.2f} H")
            if cols[6].button("🗑️", key=f"del_{row['ID']}", help="Delete record"):
                st.session_state["_pending_delete"] = row["ID"]
                st.rerun()
            if pending == row["ID"]:
                st.warning(f"Delete the record for {row['Date']}?")
                yes, no = st.columns(2)
                if yes.button("Delete", key=f"confirm_del_{row['ID']}", use_container_width=True):
                    repo.delete_record(row["ID"])
                    st.session_state.pop("_pending_delete", None)
                    st.rerun()
                if no.button("Cancel", key=f"cancel_del_{row['ID']}", use_container_width=True):
                    st.session_state.pop("_pending_delete", None)
                    st.rerun()

    # =========================
    # ⬇️ PDF — current month
    # =========================
    pdf_bytes = dataframe_to_pdf(
        month_df.iloc[::-1].drop(columns=["ID"]),
        title=f"{TITLE_APP} · {month_key}",
        summary_lines=month_summary_lines(stats),
    )
    st.download_button(
        "Download this month's PDF",
        data=pdf_bytes,
        file_name=f"report_{month_key}.pdf",
        mime="application/pdf",
        use_container_width=True,
    )

# =========================
# ⚙️ Settings
# =========================
with right:
    st.subheader("⚙️ Settings")
    d = DEFAULT_SETTINGS
    with st.form("settings"):
        st.markdown("**Attendance**")
        required_start = time_field("Required start", "s_req_start", settings.required_start, d.required_start)
        required_end = time_field("Required end", "s_req_end", settings.required_end, d.required_end)
        required_daily_hours = st.number_input(
            "Required daily hours", min_value=0.0, max_value=24.0, step=0.5,
            value=float(settings.required_daily_hours),
        )
        st.markdown("**Workday breaks**")
        normal_lunch_start = time_field("Lunch start", "s_nl_start", settings.normal_lunch_start, d.normal_lunch_start)
        normal_lunch_end = time_field("Lunch end", "s_nl_end", settings.normal_lunch_end, d.normal_lunch_end)
        normal_dinner_start = time_field("Dinner start", "s_nd_start", settings.normal_dinner_start, d.normal_dinner_start)
        normal_dinner_end = time_field("Dinner end", "s_nd_end", settings.normal_dinner_end, d.normal_dinner_end)
        st.markdown("**Holiday / overtime breaks**")
        overtime_lunch_start = time_field("Lunch start", "s_ol_start", settings.overtime_lunch_start, d.overtime_lunch_start)
        overtime_lunch_end = time_field("Lunch end", "s_ol_end", settings.overtime_lunch_end, d.overtime_lunch_end)
        save_settings = st.form_submit_button("Save settings", use_container_width=True)

    if save_settings:
        repo.save_settings(settings.updated(
            required_start=required_start,
            required_end=required_end,
            required_daily_hours=float(required_daily_hours),
            normal_lunch_start=normal_lunch_start,
            normal_lunch_end=normal_lunch_end,
            normal_dinner_start=normal_dinner_start,
            normal_dinner_end=normal_dinner_end,
            overtime_lunch_start=overtime_lunch_start,
            overtime_lunch_end=overtime_lunch_end,
        ))
        st.rerun()
