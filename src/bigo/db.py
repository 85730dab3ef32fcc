"""Database initialization and connection management."""
import os
import sqlite3
from pathlib import Path

from loguru import logger

DEFAULT_DB_PATH = os.environ.get("BIGO_DB_PATH", str(Path.home() / ".bigo" / "bigo.db"))

SCHEMA = """
CREATE TABLE IF NOT EXISTS problems (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    topic TEXT NOT NULL,
    link TEXT DEFAULT '',
    pattern TEXT DEFAULT '',
    difficulty TEXT DEFAULT 'Medium',
    confidence INTEGER DEFAULT 3,
    constraints TEXT DEFAULT '',
    trigger_signal TEXT DEFAULT '',
    aha TEXT DEFAULT '',
    code_snippet TEXT DEFAULT '',
    mistake TEXT DEFAULT '',
    related_to TEXT DEFAULT '',
    revision_count INTEGER NOT NULL DEFAULT 0,
    interval INTEGER NOT NULL DEFAULT 0,
    easiness_factor REAL NOT NULL DEFAULT 2.5,
    last_reviewed TEXT NOT NULL,
    next_review_date TEXT NOT NULL,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS review_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    problem_id TEXT NOT NULL REFERENCES problems(id) ON DELETE CASCADE,
    reviewed_at TEXT NOT NULL,
    quality INTEGER NOT NULL,
    time_taken INTEGER
);

CREATE INDEX IF NOT EXISTS idx_review_logs_problem ON review_logs(problem_id);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
    logger.debug(f"Database ready at {db_path}")
