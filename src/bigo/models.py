"""Data classes for the problem tracking domain model."""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from bigo.sm2 import next_review_date

DEFAULT_EASINESS = 2.5

DIFFICULTIES = ("Easy", "Medium", "Hard")

TOPICS = [
    "Arrays & Hashing",
    "Two Pointers",
    "Sliding Window",
    "Stack",
    "Binary Search",
    "Linked List",
    "Trees",
    "Tries",
    "Heap / Priority Queue",
    "Backtracking",
    "Graphs",
    "Advanced Graphs",
    "1-D DP",
    "2-D DP",
    "Bit Manipulation",
    "Math & Geometry",
]


def _as_datetime(value) -> datetime:
    # YAML backups may already carry parsed timestamps
    value = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if value.tzinfo is not None:
        # stored state is naive local time
        value = value.astimezone().replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class ReviewLog:
    date: datetime
    quality: int
    time_taken: Optional[int] = None  # seconds

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "quality": self.quality,
            "time_taken": self.time_taken,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewLog":
        return cls(
            date=_as_datetime(data["date"]),
            quality=int(data["quality"]),
            time_taken=data.get("time_taken"),
        )


@dataclass(frozen=True)
class SchedulingState:
    """SM-2 state attached to every tracked problem.

    Replaced wholesale on every review; never mutated in place.
    """

    revision_count: int
    interval: int
    easiness_factor: float
    last_reviewed: datetime
    next_review_date: datetime
    review_history: tuple[ReviewLog, ...] = ()

    @classmethod
    def new(cls, now: datetime | None = None) -> "SchedulingState":
        """Fresh state for a newly created problem, first due tomorrow."""
        now = now or datetime.now()
        return cls(
            revision_count=0,
            interval=0,
            easiness_factor=DEFAULT_EASINESS,
            last_reviewed=now,
            next_review_date=next_review_date(1, now),
        )

    def to_dict(self) -> dict:
        return {
            "revision_count": self.revision_count,
            "interval": self.interval,
            "easiness_factor": self.easiness_factor,
            "last_reviewed": self.last_reviewed.isoformat(),
            "next_review_date": self.next_review_date.isoformat(),
            "review_history": [log.to_dict() for log in self.review_history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchedulingState":
        return cls(
            revision_count=int(data["revision_count"]),
            interval=int(data["interval"]),
            easiness_factor=float(data["easiness_factor"]),
            last_reviewed=_as_datetime(data["last_reviewed"]),
            next_review_date=_as_datetime(data["next_review_date"]),
            review_history=tuple(ReviewLog.from_dict(log) for log in data.get("review_history", [])),
        )


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    topic: str
    state: SchedulingState
    link: str = ""
    pattern: str = ""
    difficulty: str = "Medium"
    confidence: int = 3  # 1 (low) to 5 (high)
    constraints: str = ""
    trigger: str = ""
    aha: str = ""
    code_snippet: str = ""
    mistake: str = ""
    related_to: str = ""

    @classmethod
    def new(cls, title: str, topic: str, now: datetime | None = None, **fields) -> "Problem":
        return cls(
            id=uuid.uuid4().hex,
            title=title,
            topic=topic,
            state=SchedulingState.new(now),
            **fields,
        )

    def with_state(self, state: SchedulingState) -> "Problem":
        return replace(self, state=state)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "topic": self.topic,
            "link": self.link,
            "pattern": self.pattern,
            "difficulty": self.difficulty,
            "confidence": self.confidence,
            "constraints": self.constraints,
            "trigger": self.trigger,
            "aha": self.aha,
            "code_snippet": self.code_snippet,
            "mistake": self.mistake,
            "related_to": self.related_to,
        }
        data.update(self.state.to_dict())
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Problem":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            topic=data["topic"],
            state=SchedulingState.from_dict(data),
            link=data.get("link", ""),
            pattern=data.get("pattern", ""),
            difficulty=data.get("difficulty", "Medium"),
            confidence=int(data.get("confidence", 3)),
            constraints=data.get("constraints", ""),
            trigger=data.get("trigger", ""),
            aha=data.get("aha", ""),
            code_snippet=data.get("code_snippet", ""),
            mistake=data.get("mistake", ""),
            related_to=data.get("related_to", ""),
        )
