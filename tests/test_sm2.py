# tests/test_sm2.py
from datetime import datetime, timedelta

import pytest

from bigo.sm2 import next_review_date, sm2_update, start_of_day


def test_sm2_first_review_correct():
    """First correct answer: interval=1, revision_count=1, q=4 keeps easiness."""
    result = sm2_update(quality=4, revision_count=0, easiness_factor=2.5, interval=0)
    assert result["interval"] == 1
    assert result["revision_count"] == 1
    assert result["easiness_factor"] == pytest.approx(2.5)


def test_sm2_second_review_correct():
    """Second correct answer: interval=6, q=5 raises easiness by 0.1."""
    result = sm2_update(quality=5, revision_count=1, easiness_factor=2.5, interval=1)
    assert result["interval"] == 6
    assert result["revision_count"] == 2
    assert result["easiness_factor"] == pytest.approx(2.6)


def test_sm2_third_review_correct():
    """Third+ correct: interval = round(old_interval * old easiness)."""
    result = sm2_update(quality=5, revision_count=2, easiness_factor=2.6, interval=6)
    assert result["interval"] == 16  # round(6 * 2.6)
    assert result["revision_count"] == 3
    assert result["easiness_factor"] == pytest.approx(2.7)


def test_sm2_lapse_resets_but_keeps_easiness():
    result = sm2_update(quality=1, revision_count=3, easiness_factor=2.7, interval=16)
    assert result == {"interval": 1, "revision_count": 0, "easiness_factor": 2.7}


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_sm2_every_failing_grade_is_a_lapse(quality):
    result = sm2_update(quality=quality, revision_count=5, easiness_factor=2.1, interval=30)
    assert result["revision_count"] == 0
    assert result["interval"] == 1
    assert result["easiness_factor"] == 2.1


def test_sm2_lapse_lifts_easiness_to_floor():
    result = sm2_update(quality=0, revision_count=0, easiness_factor=1.2, interval=0)
    assert result["easiness_factor"] == 1.3


@pytest.mark.parametrize("quality", [3, 4, 5])
def test_sm2_interval_ladder(quality):
    assert sm2_update(quality, 0, 2.5, 0)["interval"] == 1
    assert sm2_update(quality, 1, 2.5, 1)["interval"] == 6
    assert sm2_update(quality, 4, 2.0, 10)["interval"] == 20


def test_sm2_minimum_pass_lowers_easiness():
    result = sm2_update(quality=3, revision_count=2, easiness_factor=2.5, interval=6)
    assert result["easiness_factor"] == pytest.approx(2.36)
    assert result["revision_count"] == 3


def test_sm2_easiness_factor_minimum():
    """Easiness never drops below 1.3, however many hard passes in a row."""
    state = {"revision_count": 0, "easiness_factor": 2.5, "interval": 0}
    for _ in range(20):
        state = sm2_update(quality=3, **state)
        assert state["easiness_factor"] >= 1.3
    assert state["easiness_factor"] == 1.3


def test_start_of_day_truncates_time():
    assert start_of_day(datetime(2024, 3, 15, 23, 59, 59, 999)) == datetime(2024, 3, 15)


def test_next_review_date_is_day_aligned(now):
    due = next_review_date(1, now)
    assert due == datetime(2024, 3, 16)
    assert start_of_day(due) == due


def test_next_review_date_same_day_reviews_agree():
    morning = next_review_date(6, datetime(2024, 3, 15, 7, 0))
    evening = next_review_date(6, datetime(2024, 3, 15, 22, 45))
    assert morning == evening == datetime(2024, 3, 21)


def test_next_review_date_counts_whole_days(now):
    for n in (1, 6, 16, 45):
        assert next_review_date(n, now) == start_of_day(now) + timedelta(days=n)


def test_sm2_easiness_keeps_full_precision():
    """Easiness that doesn't sit on a 0.01 step is carried through unrounded."""
    result = sm2_update(quality=5, revision_count=2, easiness_factor=2.345, interval=6)
    assert result["easiness_factor"] == pytest.approx(2.445)
    assert result["interval"] == 14  # round(6 * 2.345)
