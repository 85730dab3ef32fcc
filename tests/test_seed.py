# tests/test_seed.py
from bigo.dashboard import build_stat_summary
from bigo.db import init_db
from bigo.problems import list_problems
from bigo.seed import is_seeded, load_demo_problems, seed_demo


def test_is_seeded(tmp_db, now):
    init_db(tmp_db)
    assert not is_seeded(tmp_db)
    seed_demo(tmp_db, now=now)
    assert is_seeded(tmp_db)


def test_demo_problems_are_anchored_to_now(now):
    problems = {p.id: p for p in load_demo_problems(now)}
    assert len(problems) == 6
    islands = problems["demo-number-of-islands"]
    assert islands.state.next_review_date.date().isoformat() == "2024-03-14"
    assert [log.quality for log in islands.state.review_history] == [3, 2]


def test_seed_demo_replaces_and_is_repeatable(tmp_db, now):
    init_db(tmp_db)
    assert seed_demo(tmp_db, now=now) == 6
    assert seed_demo(tmp_db, now=now) == 6
    assert len(list_problems(tmp_db)) == 6


def test_demo_data_covers_every_status(tmp_db, now):
    init_db(tmp_db)
    seed_demo(tmp_db, now=now)
    stats = build_stat_summary(list_problems(tmp_db), now)
    assert (stats.critical, stats.fading, stats.mastered) == (2, 1, 3)
    assert stats.solved_today == 0
    assert sum(day.count for day in stats.heatmap) == 9
