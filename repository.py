# repository.py
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, List, Optional

from sqlalchemy.pool import NullPool
from sqlalchemy import text
from sqlmodel import SQLModel, Field, Session, create_engine, select

from domain import DayType, Settings, WorkRecord

logger = logging.getLogger(__name__)

SETTINGS_KEY = "workTimer:settings"
TWELVE_HOUR_KEY = "workTimer:is12Hour"


class WorkRecordDB(SQLModel, table=True):
    __tablename__ = "work_record"

    id: str = Field(primary_key=True)
    work_date: str = Field(index=True, unique=True)
    start_time: str
    end_time: str
    day_type: str = DayType.NORMAL.value


class KeyValueDB(SQLModel, table=True):
    __tablename__ = "key_value"

    key: str = Field(primary_key=True)
    value: str


def engine_options(db_url: str, echo: bool = False) -> tuple[str, dict[str, Any]]:
    """URL and create_engine kwargs for SQLite (local file) or a remote server."""
    if db_url.startswith("sqlite"):
        return db_url, {"echo": echo, "connect_args": {"check_same_thread": False}}
    # Remote: no local pool; TLS unless the URL sets sslmode
    if "sslmode=" not in db_url:
        db_url += ("&" if "?" in db_url else "?") + "sslmode=require"
    return db_url, {
        "echo": echo,
        "pool_pre_ping": True,
        "poolclass": NullPool,
        "connect_args": {"connect_timeout": 10},
    }


def build_engine(db_url: str, echo: bool = False):
    url, kwargs = engine_options(db_url, echo=echo)
    return create_engine(url, **kwargs)


def _to_domain(row: WorkRecordDB) -> WorkRecord:
    return WorkRecord(
        id=row.id,
        date=row.work_date,
        start_time=row.start_time,
        end_time=row.end_time,
        day_type=DayType(row.day_type),
    )


class WorkRecordRepository:
    """Records (one per date) plus the key-value store for settings and preferences."""
    def __init__(self, url: str = "sqlite:///worktimer.db", echo: bool = False):
        self.url = url
        self.engine = build_engine(url, echo=echo)

        # Remote databases must be reachable at startup (fail fast)
        if not url.startswith("sqlite"):
            try:
                with self.engine.connect() as conn:
                    conn.execute(text("select 1"))
            except Exception as e:
                raise RuntimeError(f"Could not connect to database: {e}") from e

        SQLModel.metadata.create_all(self.engine)

    # ---- records ----

    def list_records(self) -> List[WorkRecord]:
        with Session(self.engine) as session:
            rows = session.exec(select(WorkRecordDB).order_by(WorkRecordDB.work_date)).all()
            return [_to_domain(r) for r in rows]

    def get_by_date(self, work_date: str) -> Optional[WorkRecord]:
        with Session(self.engine) as session:
            row = session.exec(select(WorkRecordDB).where(WorkRecordDB.work_date == work_date)).first()
            return _to_domain(row) if row else None

    def upsert_record(
        self,
        work_date: str,
        start_time: str,
        end_time: str,
        day_type: DayType | str = DayType.NORMAL,
    ) -> WorkRecord:
        """Replaces the record for `work_date` (keeping its id) or adds a new one."""
        day_type = DayType(day_type)
        with Session(self.engine) as session:
            row = session.exec(select(WorkRecordDB).where(WorkRecordDB.work_date == work_date)).first()
            if row is None:
                row = WorkRecordDB(id=uuid.uuid4().hex, work_date=work_date,
                                   start_time=start_time, end_time=end_time,
                                   day_type=day_type.value)
                logger.info("Adding record %s for %s", row.id, work_date)
            else:
                row.start_time = start_time
                row.end_time = end_time
                row.day_type = day_type.value
                logger.info("Replacing record %s for %s", row.id, work_date)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_domain(row)

    def delete_record(self, record_id: str) -> bool:
        with Session(self.engine) as session:
            row = session.get(WorkRecordDB, record_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
        logger.info("Deleted record %s", record_id)
        return True

    # ---- key-value store ----

    def get_preference(self, key: str, default: Any = None) -> Any:
        with Session(self.engine) as session:
            row = session.get(KeyValueDB, key)
            if row is None:
                return default
            try:
                return json.loads(row.value)
            except json.JSONDecodeError as e:
                logger.warning("Error parsing stored key %r: %s", key, e)
                return default

    def set_preference(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with Session(self.engine) as session:
            row = session.get(KeyValueDB, key)
            if row is None:
                row = KeyValueDB(key=key, value=payload)
            else:
                row.value = payload
            session.add(row)
            session.commit()

    def load_settings(self) -> Settings:
        data = self.get_preference(SETTINGS_KEY)
        if data is not None and not isinstance(data, dict):
            logger.warning("Stored settings are not an object, using defaults")
            data = None
        return Settings.from_dict(data)

    def save_settings(self, settings: Settings) -> None:
        self.set_preference(SETTINGS_KEY, settings.to_dict())
        logger.info("Settings saved")


__all__ = ["KeyValueDB", "SETTINGS_KEY", "TWELVE_HOUR_KEY", "WorkRecordDB", "WorkRecordRepository", "build_engine", "engine_options"]
