# domain.py
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping


class DayType(str, Enum):
    NORMAL = "normal"        # workday / swapped workday: lunch + dinner breaks
    OVERTIME = "overtime"    # holiday / weekend: lunch only, capped at 8 h


class ClockPhase(str, Enum):
    BEFORE_SHIFT = "before-shift"
    DURING_SHIFT = "during-shift"
    AFTER_SHIFT = "after-shift"


# Key-value store keys (camelCase, as persisted)
_SETTINGS_KEYS = {
    "normal_lunch_start": "normalLunchStart",
    "normal_lunch_end": "normalLunchEnd",
    "normal_dinner_start": "normalDinnerStart",
    "normal_dinner_end": "normalDinnerEnd",
    "overtime_lunch_start": "overtimeLunchStart",
    "overtime_lunch_end": "overtimeLunchEnd",
    "required_start": "requiredStart",
    "required_end": "requiredEnd",
    "required_daily_hours": "requiredDailyHours",
}


@dataclass(frozen=True)
class Settings:
    """Break windows and attendance requirements. All times are "HH:MM"."""
    normal_lunch_start: str = "12:00"
    normal_lunch_end: str = "13:30"
    normal_dinner_start: str = "17:30"
    normal_dinner_end: str = "18:00"
    overtime_lunch_start: str = "12:00"
    overtime_lunch_end: str = "13:30"
    required_start: str = "09:00"
    required_end: str = "17:30"
    required_daily_hours: float = 8.0

    def updated(self, **changes: Any) -> "Settings":
        """Returns a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {_SETTINGS_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Settings":
        """
        Builds settings from the persisted camelCase mapping.
        Unknown keys are ignored; missing or unusable values keep their defaults.
        """
        defaults = cls()
        if not data:
            return defaults
        values: dict[str, Any] = {}
        for name, key in _SETTINGS_KEYS.items():
            if key not in data or data[key] is None:
                continue
            raw = data[key]
            if name == "required_daily_hours":
                try:
                    values[name] = float(raw)
                except (TypeError, ValueError):
                    continue
            else:
                values[name] = str(raw)
        return replace(defaults, **values)


DEFAULT_SETTINGS = Settings()


@dataclass(frozen=True)
class WorkRecord:
    """One clock-in/clock-out entry. At most one per date (enforced by the store)."""
    id: str
    date: str            # "YYYY-MM-DD"
    start_time: str      # "HH:MM"
    end_time: str        # "HH:MM"
    day_type: DayType = DayType.NORMAL

    def __post_init__(self):
        if not isinstance(self.day_type, DayType):
            object.__setattr__(self, "day_type", DayType(self.day_type))


@dataclass(frozen=True)
class DashboardStats:
    total_worked_days: int = 0
    avg_daily_hours: float = 0.0
    total_overtime_hours: float = 0.0
    weekend_overtime_hours: float = 0.0
    deficit_hours: float = 0.0

    @property
    def is_on_target(self) -> bool:
        return self.deficit_hours <= 0


@dataclass(frozen=True)
class ClockStatus:
    phase: ClockPhase
    remaining_minutes: int = field(default=0)
