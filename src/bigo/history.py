"""Append-only review history."""
from dataclasses import replace
from datetime import datetime

from bigo.models import ReviewLog, SchedulingState


def append_review_log(
    state: SchedulingState,
    quality: int,
    time_taken: int | None = None,
    now: datetime | None = None,
) -> SchedulingState:
    """Return a copy of state with one more ReviewLog at the end of its history."""
    entry = ReviewLog(date=now or datetime.now(), quality=quality, time_taken=time_taken)
    return replace(state, review_history=state.review_history + (entry,))
