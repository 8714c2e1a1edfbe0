"""
Analytics views over a user's study sessions.

Each view fetches the owner's sessions once and computes everything in
memory. If the fetch (or anything after it) fails, the whole view fails
with AnalyticsUnavailable; callers never get a mix of real numbers and
zero defaults.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from core.constants import WEEK_DAYS
from core.errors import AnalyticsUnavailable
from core.models import StudySession, User
from core.numbers import round_half_up
from core.time_utils import now_local, resolve_tz
from data_access.session_repository import SessionRepository
from data_access.users_repo import UserDirectory
from services.classification import ConsistencyScore, SubjectStrength, classify_subjects, consistency_score
from services.insights import InsightInput, build_insights
from services.metrics import (
    DayBucket, SubjectStat, completion_rate, daily_buckets, hours_from_minutes,
    session_counts, subject_aggregates, total_duration_minutes,
)
from services.recommendations import RecommendationInput, Recommendations, build_recommendations
from services.trends import recent_trend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Overview:
    total_hours: float
    total_sessions: int
    completed_sessions: int
    completion_rate: int
    subject_stats: Dict[str, SubjectStat]
    weekly_activity: List[DayBucket]
    insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalHours": self.total_hours,
            "totalSessions": self.total_sessions,
            "completedSessions": self.completed_sessions,
            "completionRate": self.completion_rate,
            "subjectStats": {k: v.to_dict() for k, v in self.subject_stats.items()},
            "weeklyActivity": [b.to_dict() for b in self.weekly_activity],
            "insights": list(self.insights),
        }


@dataclass(frozen=True)
class Dashboard:
    overview: Overview
    subjects: SubjectStrength
    consistency: ConsistencyScore
    recommendations: Recommendations

    def to_dict(self) -> Dict[str, Any]:
        out = self.overview.to_dict()
        out.update(self.subjects.to_dict())
        out.update(self.consistency.to_dict())
        out.update(self.recommendations.to_dict())
        return out


@dataclass(frozen=True)
class Totals:
    total_hours: float
    total_sessions: int
    completed_sessions: int
    completion_rate: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalHours": self.total_hours,
            "totalSessions": self.total_sessions,
            "completedSessions": self.completed_sessions,
            "completionRate": self.completion_rate,
        }


@dataclass(frozen=True)
class UserTotals:
    user: User
    totals: Totals

    def to_dict(self) -> Dict[str, Any]:
        out = {"user": self.user.to_dict()}
        out.update(self.totals.to_dict())
        return out


@dataclass(frozen=True)
class AdminRollup:
    global_totals: Totals
    per_user: List[UserTotals] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"global": self.global_totals.to_dict(), "perUser": [u.to_dict() for u in self.per_user]}


def user_totals(sessions: Sequence[StudySession]) -> Totals:
    counts = session_counts(sessions)
    return Totals(
        total_hours=hours_from_minutes(total_duration_minutes(sessions)),
        total_sessions=counts.total,
        completed_sessions=counts.completed,
        completion_rate=completion_rate(counts),
    )


def combine_totals(per_user: Sequence[Totals]) -> Totals:
    """Global figures from per-user figures (hours were already rounded per user)."""
    hours = sum(t.total_hours for t in per_user)
    total = sum(t.total_sessions for t in per_user)
    completed = sum(t.completed_sessions for t in per_user)
    return Totals(
        total_hours=round_half_up(hours, 1),
        total_sessions=total,
        completed_sessions=completed,
        completion_rate=round_half_up(100.0 * completed / total) if total > 0 else 0,
    )


class AnalyticsService:
    def __init__(self, repository: SessionRepository, users: UserDirectory,
                 tz: Optional[tzinfo] = None, clock: Optional[Callable[[], datetime]] = None):
        self._repo = repository
        self._users = users
        self._tz = tz or resolve_tz()
        self._clock = clock or (lambda: now_local(self._tz))

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def today(self) -> date:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now.date()

    @contextmanager
    def _guard(self, view: str, owner_id: Optional[str] = None) -> Iterator[None]:
        try:
            yield
        except AnalyticsUnavailable:
            raise
        except Exception as e:
            logger.exception("%s analytics failed for %s", view, owner_id or "all users")
            raise AnalyticsUnavailable() from e

    def _sessions(self, owner_id: str) -> List[StudySession]:
        return list(self._repo.find_by_owner(owner_id))

    # ---- pure compositions over an already-fetched list ----
    def overview_for(self, sessions: Sequence[StudySession]) -> Overview:
        counts = session_counts(sessions)
        stats = subject_aggregates(sessions)
        week = daily_buckets(sessions, WEEK_DAYS, self.today(), self._tz)
        return Overview(
            total_hours=hours_from_minutes(total_duration_minutes(sessions)),
            total_sessions=counts.total,
            completed_sessions=counts.completed,
            completion_rate=completion_rate(counts),
            subject_stats=stats,
            weekly_activity=week,
            insights=build_insights(InsightInput(subject_stats=stats, weekly_activity=week)),
        )

    def subjects_for(self, sessions: Sequence[StudySession]) -> SubjectStrength:
        return classify_subjects(subject_aggregates(sessions))

    def consistency_for(self, sessions: Sequence[StudySession]) -> ConsistencyScore:
        return consistency_score(sessions, self.today(), self._tz)

    def recommendations_for(self, sessions: Sequence[StudySession]) -> Recommendations:
        counts = session_counts(sessions)
        return build_recommendations(RecommendationInput(
            weak_subjects=self.subjects_for(sessions).weak,
            completion_rate=completion_rate(counts),
            total_sessions=counts.total,
            trend=recent_trend(sessions, self.today(), self._tz),
        ))

    # ---- views ----
    def get_overview(self, owner_id: str) -> Overview:
        with self._guard("overview", owner_id):
            return self.overview_for(self._sessions(owner_id))

    def get_weak_strong_subjects(self, owner_id: str) -> SubjectStrength:
        with self._guard("weak-subjects", owner_id):
            return self.subjects_for(self._sessions(owner_id))

    def get_consistency_score(self, owner_id: str) -> ConsistencyScore:
        with self._guard("consistency-score", owner_id):
            return self.consistency_for(self._sessions(owner_id))

    def get_recommendations(self, owner_id: str) -> Recommendations:
        with self._guard("recommendations", owner_id):
            return self.recommendations_for(self._sessions(owner_id))

    def get_dashboard(self, owner_id: str) -> Dashboard:
        with self._guard("dashboard", owner_id):
            sessions = self._sessions(owner_id)
            return Dashboard(
                overview=self.overview_for(sessions),
                subjects=self.subjects_for(sessions),
                consistency=self.consistency_for(sessions),
                recommendations=self.recommendations_for(sessions),
            )

    def get_admin_rollup(self) -> AdminRollup:
        with self._guard("admin rollup"):
            per_user = [UserTotals(user=u, totals=user_totals(self._sessions(u.id)))
                        for u in self._users.list_all()]
            return AdminRollup(global_totals=combine_totals([u.totals for u in per_user]), per_user=per_user)
