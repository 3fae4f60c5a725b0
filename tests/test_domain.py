import dataclasses

import pytest

from domain import DEFAULT_SETTINGS, DayType, Settings, WorkRecord


def test_default_settings():
    s = DEFAULT_SETTINGS
    assert (s.normal_lunch_start, s.normal_lunch_end) == ("12:00", "13:30")
    assert (s.normal_dinner_start, s.normal_dinner_end) == ("17:30", "18:00")
    assert (s.overtime_lunch_start, s.overtime_lunch_end) == ("12:00", "13:30")
    assert (s.required_start, s.required_end) == ("09:00", "17:30")
    assert s.required_daily_hours == 8


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SETTINGS.required_start = "10:00"


def test_updated_returns_new_instance():
    s = DEFAULT_SETTINGS.updated(required_daily_hours=7.5)
    assert s.required_daily_hours == 7.5
    assert DEFAULT_SETTINGS.required_daily_hours == 8


def test_settings_dict_uses_camel_case_keys():
    d = Settings().to_dict()
    assert d["normalLunchStart"] == "12:00"
    assert d["requiredDailyHours"] == 8
    assert Settings.from_dict(d) == Settings()


def test_from_dict_fills_missing_and_ignores_unknown():
    s = Settings.from_dict({"requiredEnd": "18:00", "somethingElse": 1, "requiredStart": None})
    assert s.required_end == "18:00"
    assert s.required_start == "09:00"


def test_from_dict_bad_hours_keeps_default():
    assert Settings.from_dict({"requiredDailyHours": "lots"}).required_daily_hours == 8
    assert Settings.from_dict({"requiredDailyHours": "7"}).required_daily_hours == 7.0


def test_from_dict_empty():
    assert Settings.from_dict(None) == DEFAULT_SETTINGS
    assert Settings.from_dict({}) == DEFAULT_SETTINGS


def test_work_record_coerces_day_type():
    r = WorkRecord(id="a", date="2026-10-14", start_time="09:00", end_time="17:30", day_type="overtime")
    assert r.day_type is DayType.OVERTIME


def test_work_record_rejects_unknown_day_type():
    with pytest.raises(ValueError):
        WorkRecord(id="a", date="2026-10-14", start_time="09:00", end_time="17:30", day_type="weekend")
