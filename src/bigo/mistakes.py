"""Mistake journal: recorded pitfalls grouped by topic."""
import re
from collections import Counter
from typing import Sequence

from bigo.models import Problem

STOP_WORDS = {"the", "and", "to", "of", "in", "a", "is", "for", "it", "forgot", "missed"}


def get_mistake_journal(problems: Sequence[Problem], topic: str | None = None) -> dict[str, list[Problem]]:
    groups: dict[str, list[Problem]] = {}
    for p in problems:
        if len(p.mistake) <= 5:
            continue
        if topic and p.topic != topic:
            continue
        groups.setdefault(p.topic, []).append(p)
    return groups


def get_common_pitfalls(problems: Sequence[Problem], top: int = 5) -> list[tuple[str, int]]:
    """Keywords recurring across mistake notes.

    Needs at least three noted mistakes; only words seen more than once are kept.
    """
    noted = [p for p in problems if len(p.mistake) > 5]
    if len(noted) < 3:
        return []
    words = Counter()
    for p in noted:
        cleaned = re.sub(r"[^\w\s]", "", p.mistake.lower())
        words.update(w for w in cleaned.split() if len(w) > 3 and w not in STOP_WORDS)
    return [(word, count) for word, count in words.most_common(top) if count > 1]
