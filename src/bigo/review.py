"""Review actions and weak topic identification."""
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from bigo.errors import InvalidPriorState, InvalidQualityRating
from bigo.history import append_review_log
from bigo.models import Problem, SchedulingState
from bigo.sm2 import MIN_EASINESS, next_review_date, sm2_update


def validate_quality(quality) -> None:
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 5:
        raise InvalidQualityRating(f"quality must be an integer 0-5, got {quality!r}")


def validate_prior_state(state: SchedulingState) -> None:
    if state.revision_count < 0:
        raise InvalidPriorState(f"revision_count must be >= 0, got {state.revision_count}")
    if state.interval < 0:
        raise InvalidPriorState(f"interval must be >= 0, got {state.interval}")
    if state.easiness_factor < MIN_EASINESS:
        raise InvalidPriorState(
            f"easiness_factor must be >= {MIN_EASINESS}, got {state.easiness_factor}"
        )


def review_problem(
    problem: Problem,
    quality: int,
    time_taken: int | None = None,
    now: datetime | None = None,
) -> Problem:
    """Apply one review to a problem and return the updated copy.

    The scheduling state is replaced wholesale: SM-2 output, a due date
    derived from the new interval, and one appended history entry.
    """
    validate_quality(quality)
    validate_prior_state(problem.state)
    now = now or datetime.now()
    prior = problem.state
    updated = sm2_update(
        quality=quality,
        revision_count=prior.revision_count,
        easiness_factor=prior.easiness_factor,
        interval=prior.interval,
    )
    state = replace(
        prior,
        revision_count=updated["revision_count"],
        interval=updated["interval"],
        easiness_factor=updated["easiness_factor"],
        last_reviewed=now,
        next_review_date=next_review_date(updated["interval"], now),
    )
    state = append_review_log(state, quality, time_taken, now)
    return problem.with_state(state)


def get_weak_topics(problems: Sequence[Problem], now: datetime | None = None) -> list[dict]:
    """Per-topic share of problems not yet due (sorted weakest first)."""
    now = now or datetime.now()
    by_topic: dict[str, list[Problem]] = {}
    for p in problems:
        by_topic.setdefault(p.topic, []).append(p)
    results = []
    for topic, topic_problems in by_topic.items():
        total = len(topic_problems)
        safe = sum(1 for p in topic_problems if p.state.next_review_date > now)
        results.append({
            "topic": topic,
            "total": total,
            "safe": safe,
            "critical": total - safe,
            "health": round(safe / total * 100),
        })
    return sorted(results, key=lambda t: t["health"])
