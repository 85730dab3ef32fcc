"""Dashboard statistics: status counts, activity heatmap, trends and forecasts."""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Sequence

from bigo.models import TOPICS, Problem
from bigo.status import Status, classify_status

HEATMAP_DAYS = 14
DEFAULT_DAILY_GOAL = 3
NEUTRAL_HEALTH = 3.0  # no reviews that day: assume safe


@dataclass
class HeatmapDay:
    day: date
    count: int = 0
    health_score_sum: int = 0
    health_score: float = NEUTRAL_HEALTH


@dataclass
class StatSummary:
    total: int
    critical: int
    fading: int
    mastered: int
    daily_goal: int
    solved_today: int
    heatmap: list[HeatmapDay] = field(default_factory=list)


def health_impact(quality: int) -> int:
    """Compress a 0-5 quality rating onto the 1-3 health scale."""
    if quality < 3:
        return 1
    elif quality == 3:
        return 2
    return 3


def build_heatmap(
    problems: Sequence[Problem],
    now: datetime | None = None,
    days: int = HEATMAP_DAYS,
) -> list[HeatmapDay]:
    """Bucket every review log of the trailing window by calendar day.

    Buckets run oldest to newest and include today; logs outside the window
    are ignored.
    """
    today = (now or datetime.now()).date()
    buckets = {
        today - timedelta(days=offset): HeatmapDay(day=today - timedelta(days=offset))
        for offset in range(days - 1, -1, -1)
    }
    for p in problems:
        for log in p.state.review_history:
            bucket = buckets.get(log.date.date())
            if bucket is None:
                continue
            bucket.count += 1
            bucket.health_score_sum += health_impact(log.quality)
    heatmap = list(buckets.values())
    for bucket in heatmap:
        if bucket.count:
            bucket.health_score = bucket.health_score_sum / bucket.count
    return heatmap


def build_stat_summary(
    problems: Sequence[Problem],
    now: datetime | None = None,
    window_days: int = HEATMAP_DAYS,
    daily_goal: int = DEFAULT_DAILY_GOAL,
) -> StatSummary:
    now = now or datetime.now()
    counts = {status: 0 for status in Status}
    solved_today = 0
    for p in problems:
        counts[classify_status(p.state.next_review_date, now)] += 1
        if p.state.last_reviewed.date() == now.date():
            solved_today += 1
    return StatSummary(
        total=len(problems),
        critical=counts[Status.CRITICAL],
        fading=counts[Status.FADING],
        mastered=counts[Status.MASTERED],
        daily_goal=daily_goal,
        solved_today=solved_today,
        heatmap=build_heatmap(problems, now, window_days),
    )


def get_mastery_scores(problems: Sequence[Problem]) -> list[dict]:
    """Per-topic mastery 0-100 from average easiness and revision streak.

    Average easiness is weighted by 15 (2.5 gives 37.5); every revision in the
    streak adds 8.
    """
    results = []
    for topic in TOPICS:
        topic_problems = [p for p in problems if p.topic == topic]
        if not topic_problems:
            results.append({"topic": topic, "score": 0})
            continue
        avg_ef = sum(p.state.easiness_factor for p in topic_problems) / len(topic_problems)
        avg_revisions = sum(p.state.revision_count for p in topic_problems) / len(topic_problems)
        score = min(100, round(avg_ef * 15 + avg_revisions * 8))
        results.append({"topic": topic, "score": score})
    return results


def get_accuracy_trend(
    problems: Sequence[Problem],
    topic: str | None = None,
    limit: int = 10,
) -> list[dict]:
    """Average quality and recall time per active day, last `limit` days."""
    logs = [
        log
        for p in problems
        if topic is None or p.topic == topic
        for log in p.state.review_history
    ]
    logs.sort(key=lambda log: log.date)
    grouped: dict[date, dict] = {}
    for log in logs:
        entry = grouped.setdefault(log.date.date(), {"q_sum": 0, "t_sum": 0, "count": 0})
        entry["q_sum"] += log.quality
        entry["t_sum"] += log.time_taken or 0
        entry["count"] += 1
    trend = [
        {
            "day": day,
            "efficiency": round(entry["q_sum"] / entry["count"], 2),
            "speed": round(entry["t_sum"] / entry["count"]) if entry["t_sum"] > 0 else 0,
        }
        for day, entry in grouped.items()
    ]
    return trend[-limit:]


def get_review_forecast(
    problems: Sequence[Problem],
    now: datetime | None = None,
    days: int = 7,
) -> list[dict]:
    """How many problems fall due on each of the next `days` days, today first."""
    today = (now or datetime.now()).date()
    due_counts: dict[date, int] = {}
    for p in problems:
        day = p.state.next_review_date.date()
        due_counts[day] = due_counts.get(day, 0) + 1
    forecast = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        forecast.append({"day": day, "count": due_counts.get(day, 0)})
    return forecast


def get_due_calendar(problems: Sequence[Problem], year: int, month: int) -> dict[int, list[Problem]]:
    """Problems keyed by the day of month they fall due."""
    by_day: dict[int, list[Problem]] = {}
    for p in problems:
        due = p.state.next_review_date
        if due.year == year and due.month == month:
            by_day.setdefault(due.day, []).append(p)
    return by_day
