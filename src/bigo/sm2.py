"""SM-2 spaced repetition algorithm and due date resolution."""
from datetime import datetime, time, timedelta

MIN_EASINESS = 1.3


def sm2_update(
    quality: int,
    revision_count: int,
    easiness_factor: float,
    interval: int,
) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Rating 0-5 (0=complete blackout, 5=perfect)
        revision_count: Number of consecutive correct reviews
        easiness_factor: Current easiness factor (minimum 1.3)
        interval: Current interval in days

    Returns:
        Dict with updated interval, revision_count, easiness_factor.
    """
    if quality < 3:
        # Lapse: reset the streak, keep easiness but enforce the floor
        return {
            "interval": 1,
            "revision_count": 0,
            "easiness_factor": max(MIN_EASINESS, easiness_factor),
        }

    if revision_count == 0:
        new_interval = 1
    elif revision_count == 1:
        new_interval = 6
    else:
        new_interval = round(interval * easiness_factor)

    new_ef = easiness_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = max(MIN_EASINESS, new_ef)

    return {
        "interval": new_interval,
        "revision_count": revision_count + 1,
        "easiness_factor": new_ef,
    }


def start_of_day(moment: datetime | None = None) -> datetime:
    """Local midnight of the given moment (defaults to now)."""
    moment = moment or datetime.now()
    return datetime.combine(moment.date(), time.min)


def next_review_date(interval_days: int, now: datetime | None = None) -> datetime:
    """Absolute due date: start of today plus interval_days whole days."""
    return start_of_day(now) + timedelta(days=interval_days)
