# services/classification.py
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Dict, List, Mapping, Sequence

from core.constants import (
    AVERAGE_MIN_SCORE, EXCELLENT_MIN_SCORE, LEVEL_AVERAGE, LEVEL_EXCELLENT, LEVEL_POOR,
    WEAK_SUBJECT_THRESHOLD_PCT,
)
from core.models import StudySession
from core.numbers import Number, round_half_up
from core.time_utils import local_date
from services.metrics import SubjectStat


@dataclass(frozen=True)
class SubjectShare:
    subject: str
    total_time: Number
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"subject": self.subject, "totalTime": self.total_time, "percentage": self.percentage}


@dataclass(frozen=True)
class SubjectStrength:
    weak: List[SubjectShare] = field(default_factory=list)
    strong: List[SubjectShare] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weakSubjects": [s.to_dict() for s in self.weak],
            "strongSubjects": [s.to_dict() for s in self.strong],
        }


@dataclass(frozen=True)
class ConsistencyScore:
    score: int
    level: str

    def to_dict(self) -> Dict[str, Any]:
        return {"consistencyScore": self.score, "level": self.level}


def classify_subjects(aggregates: Mapping[str, SubjectStat]) -> SubjectStrength:
    """Split subjects on their share of total study time (< 20% is weak)."""
    total_time = sum(stat.duration_minutes for stat in aggregates.values())
    if total_time <= 0:
        return SubjectStrength()

    weak, strong = [], []
    for subject, stat in aggregates.items():
        percentage = 100.0 * stat.duration_minutes / total_time
        share = SubjectShare(subject=subject, total_time=stat.duration_minutes,
                             percentage=round_half_up(percentage, 1))
        if percentage < WEAK_SUBJECT_THRESHOLD_PCT:
            weak.append(share)
        else:
            strong.append(share)
    return SubjectStrength(weak=weak, strong=strong)


def consistency_level(score: int) -> str:
    if score >= EXCELLENT_MIN_SCORE:
        return LEVEL_EXCELLENT
    if score >= AVERAGE_MIN_SCORE:
        return LEVEL_AVERAGE
    return LEVEL_POOR


def consistency_score(sessions: Sequence[StudySession], today: date, tz: tzinfo) -> ConsistencyScore:
    """Share of days with any study since the first session, today included.

    Sessions whose date cannot be read are skipped.
    """
    if not sessions:
        return ConsistencyScore(0, LEVEL_POOR)

    days = set()
    for s in sessions:
        d = local_date(s.occurred_at, tz)
        if d is not None:
            days.add(d)
    if not days:
        return ConsistencyScore(0, LEVEL_POOR)

    total_days = (today - min(days)).days + 1
    if total_days <= 0:
        return ConsistencyScore(0, LEVEL_POOR)

    score = round_half_up(100.0 * len(days) / total_days)
    score = max(0, min(100, score))
    return ConsistencyScore(score, consistency_level(score))
