from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import config
from repository import WorkRecordRepository

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture
def store(tmp_path, monkeypatch):
    url = f"sqlite:///{(tmp_path / 'app.db').as_posix()}"
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("APP_TZ", raising=False)
    return WorkRecordRepository(url)


def _run(at: AppTest) -> AppTest:
    at.run()
    assert not at.exception
    return at


def test_clock_preference_read_once_per_run(store, monkeypatch):
    calls = []
    original = WorkRecordRepository.get_preference

    def counting(self, key, default=None):
        calls.append(key)
        return original(self, key, default)

    monkeypatch.setattr(WorkRecordRepository, "get_preference", counting)
    _run(AppTest.from_file(APP_PATH, default_timeout=30))
    # the clock fragment itself reads nothing
    assert calls.count("workTimer:is12Hour") == 1


def test_delete_asks_for_confirmation(store):
    today = config.today_local().isoformat()
    saved = store.upsert_record(today, "09:00", "17:30")
    old = store.upsert_record("2000-01-03", "09:00", "17:30")

    at = _run(AppTest.from_file(APP_PATH, default_timeout=30))
    keys = {b.key for b in at.button}
    assert f"del_{saved.id}" in keys
    assert f"del_{old.id}" not in keys  # other months are not listed

    at.button(key=f"del_{saved.id}").click()
    _run(at)
    assert store.get_by_date(today) is not None

    at.button(key=f"confirm_del_{saved.id}").click()
    _run(at)
    assert store.get_by_date(today) is None
    assert store.get_by_date("2000-01-03") is not None
