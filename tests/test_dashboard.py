# tests/test_dashboard.py
from dataclasses import replace
from datetime import date, datetime, timedelta

from bigo.dashboard import (
    build_heatmap, build_stat_summary, get_accuracy_trend, get_due_calendar,
    get_mastery_scores, get_review_forecast, health_impact,
)
from bigo.models import Problem, ReviewLog


def make_problem(now, topic="Graphs", due_in=None, last_reviewed=None, logs=(), **state_fields):
    p = Problem.new(f"{topic} problem", topic, now=now)
    changes = dict(state_fields)
    if due_in is not None:
        changes["next_review_date"] = now + due_in
    changes["last_reviewed"] = last_reviewed or now - timedelta(days=30)
    changes["review_history"] = tuple(logs)
    return p.with_state(replace(p.state, **changes))


def test_health_impact_mapping():
    assert [health_impact(q) for q in range(6)] == [1, 1, 1, 2, 3, 3]


def test_heatmap_same_day_average(now):
    p = make_problem(now, logs=[ReviewLog(now, 2), ReviewLog(now.replace(hour=9), 5)])
    today = build_heatmap([p], now)[-1]
    assert today.day == now.date()
    assert today.count == 2
    assert today.health_score_sum == 4
    assert today.health_score == 2.0


def test_heatmap_window_and_defaults(now):
    logs = [
        ReviewLog(now - timedelta(days=13), 4),
        ReviewLog(now - timedelta(days=14), 0),  # outside the window
    ]
    heatmap = build_heatmap([make_problem(now, logs=logs)], now)
    assert len(heatmap) == 14
    assert heatmap[0].day == date(2024, 3, 2)
    assert heatmap[-1].day == date(2024, 3, 15)
    assert heatmap[0].count == 1
    assert heatmap[0].health_score == 3.0
    assert sum(day.count for day in heatmap) == 1
    empty = heatmap[5]
    assert empty.count == 0 and empty.health_score == 3.0


def test_heatmap_buckets_by_calendar_day_not_24h(now):
    late_yesterday = datetime(2024, 3, 14, 23, 50)
    heatmap = build_heatmap([make_problem(now, logs=[ReviewLog(late_yesterday, 1)])], now)
    assert heatmap[-2].count == 1
    assert heatmap[-1].count == 0


def test_heatmap_merges_logs_across_problems(now):
    a = make_problem(now, logs=[ReviewLog(now, 3)])
    b = make_problem(now, topic="Trees", logs=[ReviewLog(now, 4), ReviewLog(now, 0)])
    today = build_heatmap([a, b], now)[-1]
    assert today.count == 3
    assert today.health_score == 2.0


def test_stat_summary_counts(now):
    problems = [
        make_problem(now, due_in=timedelta(days=-1)),
        make_problem(now, due_in=timedelta(0)),
        make_problem(now, due_in=timedelta(days=1)),
        make_problem(now, due_in=timedelta(days=10), last_reviewed=now.replace(hour=8)),
        make_problem(now, due_in=timedelta(days=10), last_reviewed=now - timedelta(days=1)),
    ]
    stats = build_stat_summary(problems, now)
    assert stats.total == 5
    assert (stats.critical, stats.fading, stats.mastered) == (2, 1, 2)
    assert stats.critical + stats.fading + stats.mastered == stats.total
    assert stats.solved_today == 1
    assert stats.daily_goal == 3
    assert len(stats.heatmap) == 14


def test_stat_summary_empty_collection(now):
    stats = build_stat_summary([], now, daily_goal=5)
    assert (stats.total, stats.critical, stats.fading, stats.mastered, stats.solved_today) == (0, 0, 0, 0, 0)
    assert stats.daily_goal == 5
    assert all(day.health_score == 3.0 for day in stats.heatmap)


def test_mastery_scores(now):
    problems = [
        make_problem(now, topic="Graphs", easiness_factor=2.5, revision_count=1),
        make_problem(now, topic="Graphs", easiness_factor=2.5, revision_count=3),
        make_problem(now, topic="Trees", easiness_factor=3.0, revision_count=10),
    ]
    scores = {m["topic"]: m["score"] for m in get_mastery_scores(problems)}
    assert scores["Graphs"] == 54  # round(2.5 * 15 + 2 * 8)
    assert scores["Trees"] == 100  # capped
    assert scores["Stack"] == 0


def test_mastery_score_for_fresh_topic(now):
    problems = [make_problem(now, topic="Tries", easiness_factor=2.5, revision_count=0)]
    scores = {m["topic"]: m["score"] for m in get_mastery_scores(problems)}
    assert scores["Tries"] == 38  # round(37.5)


def test_accuracy_trend(now):
    day1 = now - timedelta(days=2)
    logs_a = [ReviewLog(day1, 4, 60), ReviewLog(now, 5)]
    logs_b = [ReviewLog(day1, 3, 30)]
    problems = [make_problem(now, logs=logs_a), make_problem(now, topic="Trees", logs=logs_b)]
    trend = get_accuracy_trend(problems)
    assert trend == [
        {"day": day1.date(), "efficiency": 3.5, "speed": 45},
        {"day": now.date(), "efficiency": 5.0, "speed": 0},
    ]
    assert get_accuracy_trend(problems, topic="Trees") == [
        {"day": day1.date(), "efficiency": 3.0, "speed": 30},
    ]


def test_accuracy_trend_keeps_last_days(now):
    logs = [ReviewLog(now - timedelta(days=d), 4) for d in range(15)]
    trend = get_accuracy_trend([make_problem(now, logs=logs)], limit=10)
    assert len(trend) == 10
    assert trend[-1]["day"] == now.date()


def test_review_forecast(now):
    midnight = datetime(2024, 3, 15)
    problems = [
        make_problem(now, due_in=midnight - now),
        make_problem(now, due_in=midnight + timedelta(days=1) - now),
        make_problem(now, due_in=midnight + timedelta(days=1) - now),
        make_problem(now, due_in=midnight + timedelta(days=9) - now),
    ]
    forecast = get_review_forecast(problems, now)
    assert [f["count"] for f in forecast] == [1, 2, 0, 0, 0, 0, 0]
    assert forecast[0]["day"] == date(2024, 3, 15)


def test_due_calendar(now):
    problems = [
        make_problem(now, due_in=timedelta(days=1)),
        make_problem(now, due_in=timedelta(days=1)),
        make_problem(now, due_in=timedelta(days=30)),
    ]
    by_day = get_due_calendar(problems, 2024, 3)
    assert list(by_day) == [16]
    assert len(by_day[16]) == 2
    assert list(get_due_calendar(problems, 2024, 4)) == [14]
