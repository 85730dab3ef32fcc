"""Per-user settings stored in the database."""
from datetime import datetime

from bigo.dashboard import DEFAULT_DAILY_GOAL
from bigo.db import get_connection


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def delete_setting(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM user_settings WHERE key = ?", (key,))
    conn.commit()
    conn.close()


def get_daily_goal(db_path: str) -> int:
    return int(get_setting(db_path, "daily_goal", str(DEFAULT_DAILY_GOAL)))


def get_last_backup_date(db_path: str) -> datetime | None:
    value = get_setting(db_path, "last_backup_date")
    return datetime.fromisoformat(value) if value else None


def set_last_backup_date(db_path: str, when: datetime) -> None:
    set_setting(db_path, "last_backup_date", when.isoformat())
