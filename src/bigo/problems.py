"""Problem store: load, save and review tracked problems."""
import random
import sqlite3
from datetime import date, datetime
from typing import Sequence

from loguru import logger

from bigo.db import get_connection
from bigo.errors import ProblemNotFound
from bigo.models import Problem, ReviewLog, SchedulingState
from bigo.review import review_problem
from bigo.status import is_due

PROBLEM_COLUMNS = (
    "id", "title", "topic", "link", "pattern", "difficulty", "confidence",
    "constraints", "trigger_signal", "aha", "code_snippet", "mistake", "related_to",
    "revision_count", "interval", "easiness_factor", "last_reviewed", "next_review_date",
)


def _row_to_problem(row: sqlite3.Row, logs: list[ReviewLog]) -> Problem:
    state = SchedulingState(
        revision_count=row["revision_count"],
        interval=row["interval"],
        easiness_factor=row["easiness_factor"],
        last_reviewed=datetime.fromisoformat(row["last_reviewed"]),
        next_review_date=datetime.fromisoformat(row["next_review_date"]),
        review_history=tuple(logs),
    )
    return Problem(
        id=row["id"],
        title=row["title"],
        topic=row["topic"],
        state=state,
        link=row["link"] or "",
        pattern=row["pattern"] or "",
        difficulty=row["difficulty"] or "Medium",
        confidence=row["confidence"],
        constraints=row["constraints"] or "",
        trigger=row["trigger_signal"] or "",
        aha=row["aha"] or "",
        code_snippet=row["code_snippet"] or "",
        mistake=row["mistake"] or "",
        related_to=row["related_to"] or "",
    )


def _row_to_log(row: sqlite3.Row) -> ReviewLog:
    return ReviewLog(
        date=datetime.fromisoformat(row["reviewed_at"]),
        quality=row["quality"],
        time_taken=row["time_taken"],
    )


def _problem_values(problem: Problem) -> tuple:
    s = problem.state
    return (
        problem.id, problem.title, problem.topic, problem.link, problem.pattern,
        problem.difficulty, problem.confidence, problem.constraints, problem.trigger,
        problem.aha, problem.code_snippet, problem.mistake, problem.related_to,
        s.revision_count, s.interval, s.easiness_factor,
        s.last_reviewed.isoformat(), s.next_review_date.isoformat(),
    )


def _write_problem(conn: sqlite3.Connection, problem: Problem) -> int:
    """Upsert the problem row and append any history not yet stored.

    Returns the number of review logs written.
    """
    placeholders = ", ".join("?" for _ in PROBLEM_COLUMNS)
    updates = ", ".join(f"{col}=excluded.{col}" for col in PROBLEM_COLUMNS[1:])
    conn.execute(
        f"""INSERT INTO problems ({", ".join(PROBLEM_COLUMNS)}, created_at)
        VALUES ({placeholders}, ?)
        ON CONFLICT(id) DO UPDATE SET {updates}""",
        _problem_values(problem) + (datetime.now().isoformat(),),
    )
    stored = conn.execute(
        "SELECT COUNT(*) FROM review_logs WHERE problem_id = ?", (problem.id,)
    ).fetchone()[0]
    new_logs = problem.state.review_history[stored:]
    conn.executemany(
        "INSERT INTO review_logs (problem_id, reviewed_at, quality, time_taken) VALUES (?, ?, ?, ?)",
        [(problem.id, log.date.isoformat(), log.quality, log.time_taken) for log in new_logs],
    )
    return len(new_logs)


def add_problem(db_path: str, problem: Problem) -> Problem:
    conn = get_connection(db_path)
    _write_problem(conn, problem)
    conn.commit()
    conn.close()
    logger.info(f"Added problem {problem.id} ({problem.title})")
    return problem


def save_problem(db_path: str, problem: Problem) -> Problem:
    """Write back the full problem. Review history is only ever appended."""
    conn = get_connection(db_path)
    exists = conn.execute("SELECT 1 FROM problems WHERE id = ?", (problem.id,)).fetchone()
    if not exists:
        conn.close()
        raise ProblemNotFound(problem.id)
    written = _write_problem(conn, problem)
    conn.commit()
    conn.close()
    logger.debug(f"Saved problem {problem.id} (+{written} review logs)")
    return problem


def save_problems(db_path: str, problems: Sequence[Problem]) -> int:
    """Upsert many problems in one transaction."""
    conn = get_connection(db_path)
    for p in problems:
        _write_problem(conn, p)
    conn.commit()
    conn.close()
    return len(problems)


def get_problem(db_path: str, problem_id: str) -> Problem:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM problems WHERE id = ?", (problem_id,)).fetchone()
    if row is None:
        conn.close()
        raise ProblemNotFound(problem_id)
    logs = conn.execute(
        "SELECT * FROM review_logs WHERE problem_id = ? ORDER BY id", (problem_id,)
    ).fetchall()
    conn.close()
    return _row_to_problem(row, [_row_to_log(r) for r in logs])


def list_problems(db_path: str) -> list[Problem]:
    """All problems, newest first, each with its full review history."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM problems ORDER BY created_at DESC, rowid DESC").fetchall()
    logs: dict[str, list[ReviewLog]] = {}
    for r in conn.execute("SELECT * FROM review_logs ORDER BY id").fetchall():
        logs.setdefault(r["problem_id"], []).append(_row_to_log(r))
    conn.close()
    return [_row_to_problem(row, logs.get(row["id"], [])) for row in rows]


def delete_problem(db_path: str, problem_id: str) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM problems WHERE id = ?", (problem_id,))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()
    if deleted == 0:
        raise ProblemNotFound(problem_id)
    logger.info(f"Deleted problem {problem_id}")


def clear_all(db_path: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM review_logs")
    conn.execute("DELETE FROM problems")
    conn.execute("DELETE FROM user_settings WHERE key = 'last_backup_date'")
    conn.commit()
    conn.close()
    logger.warning("All problems and review history cleared")


def record_review(
    db_path: str,
    problem_id: str,
    quality: int,
    time_taken: int | None = None,
    now: datetime | None = None,
) -> Problem:
    """Load a problem, apply one review and write the result back."""
    problem = get_problem(db_path, problem_id)
    updated = review_problem(problem, quality, time_taken, now)
    save_problem(db_path, updated)
    logger.info(
        f"Reviewed {problem_id} q={quality}: interval {problem.state.interval} -> "
        f"{updated.state.interval}, EF {updated.state.easiness_factor}"
    )
    return updated


def log_mistake(db_path: str, problem_id: str, mistake: str) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("UPDATE problems SET mistake = ? WHERE id = ?", (mistake, problem_id))
    updated = cursor.rowcount
    conn.commit()
    conn.close()
    if updated == 0:
        raise ProblemNotFound(problem_id)


def get_due_problems(db_path: str, now: datetime | None = None, limit: int | None = None) -> list[Problem]:
    """Problems due now, most overdue first."""
    now = now or datetime.now()
    due = [p for p in list_problems(db_path) if is_due(p, now)]
    due.sort(key=lambda p: p.state.next_review_date)
    return due[:limit] if limit is not None else due


def filter_problems(
    problems: Sequence[Problem],
    search: str = "",
    topic: str | None = None,
    due_only: bool = False,
    reviewed_on: date | None = None,
    now: datetime | None = None,
) -> list[Problem]:
    now = now or datetime.now()
    needle = search.lower()
    results = []
    for p in problems:
        if needle and not (
            needle in p.title.lower() or needle in p.pattern.lower() or needle in p.trigger.lower()
        ):
            continue
        if topic and p.topic != topic:
            continue
        if due_only and not is_due(p, now):
            continue
        if reviewed_on and p.state.last_reviewed.date() != reviewed_on:
            continue
        results.append(p)
    return results


def pick_interleaved(
    problems: Sequence[Problem],
    topic: str | None = None,
    count: int = 5,
    rng: random.Random | None = None,
) -> list[Problem]:
    """Random mixed-topic sample, or a single-topic one for healing a weak topic."""
    pool = [p for p in problems if topic is None or p.topic == topic]
    rng = rng or random.Random()
    return rng.sample(pool, min(count, len(pool)))
