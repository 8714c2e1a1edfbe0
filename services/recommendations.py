# services/recommendations.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.constants import WEAK_SUBJECT_THRESHOLD_PCT
from services.classification import SubjectShare
from services.trends import Trend

LOW_COMPLETION_RATE = 50
GOOD_COMPLETION_RATE = 80


@dataclass(frozen=True)
class RecommendationInput:
    weak_subjects: Sequence[SubjectShare]
    completion_rate: int
    total_sessions: int
    trend: Optional[Trend] = None


@dataclass(frozen=True)
class Recommendations:
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"recommendations": list(self.messages)}


def weak_subjects_rule(data: RecommendationInput) -> Optional[str]:
    if not data.weak_subjects:
        return None
    names = ", ".join(s.subject for s in data.weak_subjects)
    return (f"Increase focused study time for weaker subjects: {names}. "
            f"Aim to bring each to at least {WEAK_SUBJECT_THRESHOLD_PCT}% of your total study time.")


def completion_rule(data: RecommendationInput) -> Optional[str]:
    # a brand-new user has nothing to finish yet
    if data.total_sessions <= 0:
        return None
    if data.completion_rate < LOW_COMPLETION_RATE:
        return ("Less than half of your study sessions are completed. "
                "Prioritize finishing pending tasks before adding new ones.")
    if data.completion_rate < GOOD_COMPLETION_RATE:
        return ("Your completion rate is decent. "
                "Consider tightening your schedule to close more sessions successfully.")
    return None


def momentum_rule(data: RecommendationInput) -> Optional[str]:
    if data.trend is None or not data.trend.declining:
        return None
    return ("Your study time over the last 7 days is lower than the previous week. "
            "Consider scheduling shorter but consistent daily sessions to recover momentum.")


RULES: List[Callable[[RecommendationInput], Optional[str]]] = [
    weak_subjects_rule,
    completion_rule,
    momentum_rule,
]


def build_recommendations(data: RecommendationInput) -> Recommendations:
    messages = []
    for rule in RULES:
        message = rule(data)
        if message:
            messages.append(message)
    return Recommendations(messages)
