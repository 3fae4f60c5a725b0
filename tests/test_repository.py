import pytest
from sqlalchemy.pool import NullPool
from sqlmodel import Session

from domain import DEFAULT_SETTINGS, DayType
from repository import SETTINGS_KEY, TWELVE_HOUR_KEY, KeyValueDB, WorkRecordRepository, engine_options


@pytest.fixture
def repo(tmp_path):
    return WorkRecordRepository(f"sqlite:///{(tmp_path / 'test.db').as_posix()}")


def test_empty_repository(repo):
    assert repo.list_records() == []
    assert repo.load_settings() == DEFAULT_SETTINGS


def test_upsert_adds_records_sorted_by_date(repo):
    repo.upsert_record("2026-10-14", "09:00", "17:30")
    repo.upsert_record("2026-10-02", "08:00", "19:00", DayType.OVERTIME)
    records = repo.list_records()
    assert [r.date for r in records] == ["2026-10-02", "2026-10-14"]
    assert records[0].day_type is DayType.OVERTIME
    assert records[0].id != records[1].id


def test_resubmission_replaces_and_keeps_id(repo):
    first = repo.upsert_record("2026-10-14", "09:00", "17:30")
    second = repo.upsert_record("2026-10-14", "10:00", "19:00", "overtime")
    assert second.id == first.id
    records = repo.list_records()
    assert len(records) == 1
    assert (records[0].start_time, records[0].end_time) == ("10:00", "19:00")
    assert records[0].day_type is DayType.OVERTIME


def test_get_by_date(repo):
    saved = repo.upsert_record("2026-10-14", "09:00", "17:30")
    assert repo.get_by_date("2026-10-14") == saved
    assert repo.get_by_date("2026-10-15") is None


def test_delete_record(repo):
    saved = repo.upsert_record("2026-10-14", "09:00", "17:30")
    assert repo.delete_record(saved.id) is True
    assert repo.list_records() == []
    assert repo.delete_record(saved.id) is False


def test_settings_round_trip(repo):
    custom = DEFAULT_SETTINGS.updated(normal_dinner_start="18:00", normal_dinner_end="18:45",
                                      required_daily_hours=7.5)
    repo.save_settings(custom)
    assert repo.load_settings() == custom


def test_preferences(repo):
    assert repo.get_preference(TWELVE_HOUR_KEY, False) is False
    repo.set_preference(TWELVE_HOUR_KEY, True)
    assert repo.get_preference(TWELVE_HOUR_KEY, False) is True
    repo.set_preference(TWELVE_HOUR_KEY, False)
    assert repo.get_preference(TWELVE_HOUR_KEY, True) is False


def test_corrupt_settings_fall_back_to_defaults(repo):
    with Session(repo.engine) as session:
        session.add(KeyValueDB(key=SETTINGS_KEY, value="{not json"))
        session.commit()
    assert repo.load_settings() == DEFAULT_SETTINGS


def test_non_object_settings_fall_back_to_defaults(repo):
    repo.set_preference(SETTINGS_KEY, [1, 2, 3])
    assert repo.load_settings() == DEFAULT_SETTINGS


def test_engine_options_sqlite():
    url, kwargs = engine_options("sqlite:///x.db")
    assert url == "sqlite:///x.db"
    assert kwargs["connect_args"] == {"check_same_thread": False}
    assert "poolclass" not in kwargs


def test_engine_options_remote_requires_tls():
    url, kwargs = engine_options("postgresql://u:p@host/db")
    assert url == "postgresql://u:p@host/db?sslmode=require"
    assert kwargs["poolclass"] is NullPool
    assert kwargs["connect_args"] == {"connect_timeout": 10}
    url, _ = engine_options("postgresql://u:p@host/db?application_name=wt")
    assert url.endswith("?application_name=wt&sslmode=require")
    url, _ = engine_options("postgresql://u:p@host/db?sslmode=disable")
    assert url == "postgresql://u:p@host/db?sslmode=disable"
