# config.py
# Environment-driven configuration (paths, database URL, timezone, logging).
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, date
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Stdout logging. Level comes from the argument, then LOG_LEVEL, then INFO."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[handler],
    )


# =========================
# Data dir / database
# =========================
def pick_data_dir() -> Path:
    candidates = []
    env = os.getenv("DATA_DIR")
    if env:
        candidates.append(Path(env))
    candidates += [Path("/data"), Path.cwd() / "data"]

    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            t = p / ".rwtest"
            t.write_text("ok")
            t.unlink(missing_ok=True)
            return p
        except OSError:
            logger.debug("Data dir %s not writable, trying next", p)
            continue
    return Path.cwd()


def database_url(data_dir: Path) -> str:
    default_sqlite = f"sqlite:///{(data_dir / 'worktimer.db').as_posix()}"
    return os.getenv("DATABASE_URL", default_sqlite)


# =========================
# Timezone (local wall-clock unless APP_TZ is set)
# =========================
def app_timezone() -> ZoneInfo | None:
    name = os.getenv("APP_TZ")
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TZ %r, using local time", name)
        return None


def now_local(tz: ZoneInfo | None = None) -> datetime:
    return datetime.now(tz) if tz else datetime.now()


def today_local(tz: ZoneInfo | None = None) -> date:
    return now_local(tz).date()
