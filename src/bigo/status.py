"""Critical / Fading / Mastered urgency classification."""
from datetime import datetime, timedelta
from enum import Enum

FADING_WINDOW = timedelta(days=2)


class Status(str, Enum):
    CRITICAL = "Critical"
    FADING = "Fading"
    MASTERED = "Mastered"


STATUS_COLORS = {
    Status.CRITICAL: "red",
    Status.FADING: "yellow",
    Status.MASTERED: "green",
}


def classify_status(next_review_date: datetime, now: datetime | None = None) -> Status:
    """Classify a due date relative to now.

    Critical when due or overdue, Fading when due within the next two days,
    Mastered otherwise. Critical is checked first.
    """
    now = now or datetime.now()
    if now >= next_review_date:
        return Status.CRITICAL
    elif now >= next_review_date - FADING_WINDOW:
        return Status.FADING
    return Status.MASTERED


def is_due(problem, now: datetime | None = None) -> bool:
    return classify_status(problem.state.next_review_date, now) is Status.CRITICAL


def get_status_color(status: Status) -> str:
    return STATUS_COLORS[status]
