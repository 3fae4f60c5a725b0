# services.py
from __future__ import annotations
import logging
from datetime import date, datetime
from typing import Iterable, Optional

from domain import (
    ClockPhase,
    ClockStatus,
    DashboardStats,
    DayType,
    Settings,
    WorkRecord,
)

logger = logging.getLogger(__name__)

OVERTIME_DAILY_CAP_HOURS = 8.0
WEEKEND_DAYS = (5, 6)  # date.weekday(): Saturday, Sunday


def time_to_minutes(value: str | None) -> Optional[int]:
    """Converts "HH:MM" to minutes since midnight. None if empty or malformed."""
    if not value:
        return None
    try:
        hh, mm = value.strip().split(":")[:2]
        h, m = int(hh), int(mm)
    except (AttributeError, ValueError):
        return None
    if not (0 <= h < 24 and 0 <= m < 60):
        return None
    return h * 60 + m


def overlap(start1: int, end1: int, start2: int, end2: int) -> int:
    """Length in minutes of the intersection of [start1, end1) and [start2, end2)."""
    overlap_start = max(start1, start2)
    overlap_end = min(end1, end2)
    if overlap_start < overlap_end:
        return overlap_end - overlap_start
    return 0


def parse_record_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


class IntervalCalculator:
    """Net worked hours of a single record, after break deductions."""
    def __init__(self, overtime_cap_hours: float = OVERTIME_DAILY_CAP_HOURS):
        self.overtime_cap_hours = overtime_cap_hours

    def break_windows(self, day_type: DayType, settings: Settings) -> list[tuple[str, str]]:
        if day_type == DayType.NORMAL:
            return [
                (settings.normal_lunch_start, settings.normal_lunch_end),
                (settings.normal_dinner_start, settings.normal_dinner_end),
            ]
        return [(settings.overtime_lunch_start, settings.overtime_lunch_end)]

    def break_minutes(self, start: int, end: int, day_type: DayType, settings: Settings) -> int:
        total = 0
        for w_start, w_end in self.break_windows(day_type, settings):
            ws, we = time_to_minutes(w_start), time_to_minutes(w_end)
            if ws is None or we is None:
                continue
            total += overlap(start, end, ws, we)
        return total

    def compute_net_hours(self, record: WorkRecord, settings: Settings) -> float:
        """Returns net hours (>= 0). Invalid or inverted times yield 0."""
        start = time_to_minutes(record.start_time)
        end = time_to_minutes(record.end_time)
        if start is None or end is None or end <= start:
            return 0.0

        net_minutes = (end - start) - self.break_minutes(start, end, record.day_type, settings)
        hours = max(0, net_minutes) / 60.0

        if record.day_type == DayType.OVERTIME:
            hours = min(hours, self.overtime_cap_hours)
        return hours


class MonthlyAggregator:
    """Folds the current month's records into dashboard statistics."""
    def __init__(self, calculator: IntervalCalculator | None = None):
        self.calculator = calculator or IntervalCalculator()

    def records_in_month(self, records: Iterable[WorkRecord], reference_date: date) -> list[tuple[WorkRecord, date]]:
        month_records = []
        for r in records:
            d = parse_record_date(r.date)
            if d is None:
                logger.debug("Skipping record %s with unparsable date %r", r.id, r.date)
                continue
            if (d.year, d.month) == (reference_date.year, reference_date.month):
                month_records.append((r, d))
        return month_records

    def compute_dashboard(
        self,
        records: Iterable[WorkRecord],
        settings: Settings,
        reference_date: date | datetime,
    ) -> DashboardStats:
        month_records = self.records_in_month(records, reference_date)
        normal_days = [(r, d) for r, d in month_records if r.day_type == DayType.NORMAL]
        overtime_days = [(r, d) for r, d in month_records if r.day_type == DayType.OVERTIME]

        total_worked_days = len(normal_days)
        total_normal_hours = sum(
            self.calculator.compute_net_hours(r, settings) for r, _ in normal_days
        )
        avg_daily_hours = total_normal_hours / total_worked_days if total_worked_days > 0 else 0.0

        required_total_hours = total_worked_days * settings.required_daily_hours
        # drop float residue from minute-based hours
        deficit_hours = max(0.0, round(required_total_hours - total_normal_hours, 9))

        total_overtime_hours = 0.0
        weekend_overtime_hours = 0.0
        for r, d in overtime_days:
            hours = self.calculator.compute_net_hours(r, settings)
            total_overtime_hours += hours
            # weekday taken from the stored date, never from the clock
            if d.weekday() in WEEKEND_DAYS:
                weekend_overtime_hours += hours

        return DashboardStats(
            total_worked_days=total_worked_days,
            avg_daily_hours=avg_daily_hours,
            total_overtime_hours=total_overtime_hours,
            weekend_overtime_hours=weekend_overtime_hours,
            deficit_hours=deficit_hours,
        )


# =========================
# Public API
# =========================
_calculator = IntervalCalculator()
_aggregator = MonthlyAggregator(_calculator)


def compute_net_hours(record: WorkRecord, settings: Settings) -> float:
    return _calculator.compute_net_hours(record, settings)


def compute_dashboard(
    records: Iterable[WorkRecord],
    settings: Settings,
    reference_date: date | datetime,
) -> DashboardStats:
    return _aggregator.compute_dashboard(records, settings, reference_date)


def compute_status(now_minutes: int, required_start: str, required_end: str) -> ClockStatus:
    """Classifies `now_minutes` against the required attendance window [start, end)."""
    start = time_to_minutes(required_start) or 0
    end = time_to_minutes(required_end) or 0
    if now_minutes < start:
        return ClockStatus(ClockPhase.BEFORE_SHIFT, start - now_minutes)
    if now_minutes < end:
        return ClockStatus(ClockPhase.DURING_SHIFT, end - now_minutes)
    return ClockStatus(ClockPhase.AFTER_SHIFT, 0)


__all__ = [
    "IntervalCalculator",
    "MonthlyAggregator",
    "OVERTIME_DAILY_CAP_HOURS",
    "compute_dashboard",
    "compute_net_hours",
    "compute_status",
    "overlap",
    "parse_record_date",
    "time_to_minutes",
]
