"""Load the bundled demo problems."""
import json
from datetime import datetime, timedelta
from pathlib import Path

from loguru import logger

from bigo.db import get_connection
from bigo.models import Problem, ReviewLog, SchedulingState
from bigo.problems import clear_all, save_problems
from bigo.sm2 import next_review_date

CONTENT_DIR = Path(__file__).parent / "content"

PROBLEM_FIELDS = (
    "link", "pattern", "difficulty", "confidence", "constraints",
    "trigger", "aha", "code_snippet", "mistake", "related_to",
)


def is_seeded(db_path: str) -> bool:
    """Check whether the store holds any problems."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM problems").fetchone()[0]
    conn.close()
    return count > 0


def load_demo_problems(now: datetime | None = None) -> list[Problem]:
    """Demo problems with dates anchored to now (offsets are stored in days)."""
    now = now or datetime.now()
    data = json.loads((CONTENT_DIR / "demo_problems.json").read_text(encoding="utf-8"))
    problems = []
    for item in data["problems"]:
        history = tuple(
            ReviewLog(
                date=now - timedelta(days=log["days_ago"]),
                quality=log["quality"],
                time_taken=log.get("time_taken"),
            )
            for log in item["history"]
        )
        state = SchedulingState(
            revision_count=item["revision_count"],
            interval=item["interval"],
            easiness_factor=item["easiness_factor"],
            last_reviewed=now - timedelta(days=item["last_reviewed_days_ago"]),
            next_review_date=next_review_date(item["next_review_in_days"], now),
            review_history=history,
        )
        problems.append(Problem(
            id=item["id"],
            title=item["title"],
            topic=item["topic"],
            state=state,
            **{k: item[k] for k in PROBLEM_FIELDS if k in item},
        ))
    return problems


def seed_demo(db_path: str, now: datetime | None = None) -> int:
    """Replace the store's contents with the demo problems."""
    problems = load_demo_problems(now)
    clear_all(db_path)
    save_problems(db_path, problems)
    logger.info(f"Seeded {len(problems)} demo problems")
    return len(problems)
