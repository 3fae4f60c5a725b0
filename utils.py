# utils.py
import io
from datetime import datetime, time
from typing import Iterable, Sequence

import pandas as pd

from domain import ClockPhase, ClockStatus, DashboardStats, Settings, WorkRecord
from services import compute_net_hours, parse_record_date, time_to_minutes

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_TYPE_LABELS = {"normal": "Workday", "overtime": "Holiday / overtime"}


def minutes_to_hhmm(total_minutes: float) -> str:
    total = int(round(total_minutes))
    hours, minutes = divmod(max(0, total), 60)
    return f"{hours:02d}:{minutes:02d}"


def hhmm_to_time(value: str) -> time | None:
    minutes = time_to_minutes(value)
    return time(*divmod(minutes, 60)) if minutes is not None else None


def format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def countdown_message(status: ClockStatus) -> str:
    if status.phase == ClockPhase.BEFORE_SHIFT:
        return f"Time until shift start: {minutes_to_hhmm(status.remaining_minutes)}"
    if status.phase == ClockPhase.DURING_SHIFT:
        return f"Time until shift end: {minutes_to_hhmm(status.remaining_minutes)}"
    return "Past end of shift"


def format_clock(now: datetime, twelve_hour: bool = False) -> str:
    """H:MM:SS, or H:MM:SS AM/PM in 12-hour mode."""
    if twelve_hour:
        hour = now.hour % 12 or 12
        suffix = "AM" if now.hour < 12 else "PM"
        return f"{hour}:{now.minute:02d}:{now.second:02d} {suffix}"
    return f"{now.hour}:{now.minute:02d}:{now.second:02d}"


def now_minutes(now: datetime) -> int:
    return now.hour * 60 + now.minute


def deficit_label(stats: DashboardStats) -> str:
    if stats.deficit_hours > 0:
        return f"Short {format_hours(stats.deficit_hours)} H"
    return "On target"


def records_to_dataframe(records: Iterable[WorkRecord], settings: Settings) -> pd.DataFrame:
    rows = []
    for r in records:
        d = parse_record_date(r.date)
        rows.append({
            "ID": r.id,
            "Date": r.date,
            "Day": WEEKDAYS[d.weekday()] if d else "",
            "Start": r.start_time,
            "End": r.end_time,
            "Type": DAY_TYPE_LABELS.get(r.day_type.value, r.day_type.value),
            "Net hours": round(compute_net_hours(r, settings), 2),
        })
    df = pd.DataFrame(rows, columns=["ID", "Date", "Day", "Start", "End", "Type", "Net hours"])
    if not df.empty:
        df = df.sort_values(["Date"]).reset_index(drop=True)
    return df


# =========================
# PDF (current month report)
# =========================
def dataframe_to_pdf(df: pd.DataFrame, title: str, summary_lines: Sequence[str] = ()) -> bytes:
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.enums import TA_CENTER
    from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(A4), topMargin=24, bottomMargin=24, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    summary_style = ParagraphStyle(
        name="Summary", parent=styles["Normal"], alignment=TA_CENTER,
        textColor=colors.black, fontSize=11, leading=13, spaceBefore=4, spaceAfter=2
    )
    story = [Paragraph(title, title_style), Spacer(1, 8)]
    if df.empty:
        story.append(Paragraph("No records to show.", styles["Normal"]))
    else:
        data = [list(df.columns)] + df.astype(str).values.tolist()
        table = Table(data, repeatRows=1, hAlign="CENTER")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        story.append(table)
    if summary_lines:
        story.append(Spacer(1, 12))
        story += [Paragraph(line, summary_style) for line in summary_lines]

    doc.build(story)
    return buf.getvalue()


def month_summary_lines(stats: DashboardStats) -> list[str]:
    return [
        f"Worked days: {stats.total_worked_days} · Average: {format_hours(stats.avg_daily_hours)} H",
        f"Overtime: {format_hours(stats.total_overtime_hours)} H "
        f"(weekend {format_hours(stats.weekend_overtime_hours)} H) · {deficit_label(stats)}",
    ]


def month_log(df: pd.DataFrame, month_key: str) -> pd.DataFrame:
    """Rows of the "YYYY-MM" month only, newest first."""
    if df.empty:
        return df
    month = df[df["Date"].str.startswith(month_key)]
    return month.sort_values(["Date"], ascending=False).reset_index(drop=True)
