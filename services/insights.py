# services/insights.py
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence

from core.constants import STREAK_ACTIVE_DAYS, WEEKEND_LABELS
from core.numbers import round_half_up
from services.metrics import DayBucket, SubjectStat


@dataclass(frozen=True)
class InsightInput:
    subject_stats: Mapping[str, SubjectStat]
    weekly_activity: Sequence[DayBucket]


def lowest_completion_rule(data: InsightInput) -> Optional[str]:
    weakest, min_rate = None, 101.0
    for subject, stat in data.subject_stats.items():
        if not stat.count:
            continue
        rate = 100.0 * stat.completed_count / stat.count
        # strict: the first subject seen wins a tie
        if rate < min_rate:
            weakest, min_rate = subject, rate
    if weakest is None:
        return None
    return f"{weakest} needs more focus (Completion rate: {round_half_up(min_rate)}%)"


def weekend_rule(data: InsightInput) -> Optional[str]:
    weekend = sum(b.duration_minutes for b in data.weekly_activity if b.label in WEEKEND_LABELS)
    weekday = sum(b.duration_minutes for b in data.weekly_activity if b.label not in WEEKEND_LABELS)
    if weekend > weekday:
        return "You study more on weekends"
    if weekday > 0:
        return "Consistent weekday study habits detected"
    return None


def streak_rule(data: InsightInput) -> Optional[str]:
    active_days = sum(1 for b in data.weekly_activity if b.duration_minutes > 0)
    if active_days >= STREAK_ACTIVE_DAYS:
        return "Study consistency improved this week! Keep it up."
    return None


RULES: List[Callable[[InsightInput], Optional[str]]] = [
    lowest_completion_rule,
    weekend_rule,
    streak_rule,
]


def build_insights(data: InsightInput) -> List[str]:
    insights = []
    for rule in RULES:
        text = rule(data)
        if text:
            insights.append(text)
    return insights
