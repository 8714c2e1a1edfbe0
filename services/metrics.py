# services/metrics.py
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from core.constants import STATUS_COMPLETED
from core.models import StudySession
from core.numbers import Number, as_minutes, round_half_up, tidy
from core.time_utils import local_date_key, weekday_label, window_dates

FRAME_COLUMNS = ["subject", "duration", "status", "day_key"]


@dataclass(frozen=True)
class SessionCounts:
    total: int
    completed: int


@dataclass(frozen=True)
class SubjectStat:
    duration_minutes: Number
    count: int
    completed_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"duration": self.duration_minutes, "count": self.count, "completed": self.completed_count}


@dataclass(frozen=True)
class DayBucket:
    label: str
    key: str
    duration_minutes: Number

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.label, "fullDate": self.key, "duration": self.duration_minutes}


def sessions_frame(sessions: Sequence[StudySession], tz: Optional[tzinfo] = None) -> pd.DataFrame:
    """One row per session; durations already coerced, day keys only when ``tz`` is given."""
    rows = [{
        "subject": s.subject if s.subject else "",
        "duration": as_minutes(s.duration_minutes),
        "status": s.status,
        "day_key": local_date_key(s.activity_time, tz) if tz is not None else None,
    } for s in sessions]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame["duration"] = frame["duration"].astype(float)
    return frame


def total_duration_minutes(sessions: Sequence[StudySession]) -> Number:
    return tidy(sessions_frame(sessions)["duration"].sum())


def session_counts(sessions: Sequence[StudySession]) -> SessionCounts:
    frame = sessions_frame(sessions)
    return SessionCounts(total=len(frame), completed=int((frame["status"] == STATUS_COMPLETED).sum()))


def completion_rate(counts: SessionCounts) -> int:
    if counts.total <= 0:
        return 0
    return round_half_up(100.0 * counts.completed / counts.total)


def hours_from_minutes(minutes: Number) -> float:
    return round_half_up(float(minutes) / 60.0, 1)


def subject_aggregates(sessions: Sequence[StudySession]) -> Dict[str, SubjectStat]:
    """Per-subject duration/count/completed, in first-seen subject order.

    Sessions without a subject are left out.
    """
    frame = sessions_frame(sessions)
    frame = frame[frame["subject"] != ""]
    if frame.empty:
        return {}
    frame = frame.assign(done=(frame["status"] == STATUS_COMPLETED).astype(int))
    grouped = frame.groupby("subject", sort=False).agg(
        minutes=("duration", "sum"),
        sessions=("duration", "size"),
        completed=("done", "sum"),
    )
    return {
        subject: SubjectStat(
            duration_minutes=tidy(row["minutes"]),
            count=int(row["sessions"]),
            completed_count=int(row["completed"]),
        )
        for subject, row in grouped.iterrows()
    }


def daily_buckets(sessions: Sequence[StudySession], window_days: int,
                  reference_date: date, tz: tzinfo) -> List[DayBucket]:
    """``window_days`` local calendar days ending at ``reference_date``, oldest first.

    A session lands in the bucket of the local date of ``occurred_at``
    (``created_at`` when missing); anything outside the window is dropped.
    """
    if window_days < 1:
        raise ValueError("window_days must be at least 1")
    frame = sessions_frame(sessions, tz)
    by_day = frame.groupby("day_key")["duration"].sum()
    buckets = []
    for d in window_dates(reference_date, window_days):
        key = d.isoformat()
        buckets.append(DayBucket(label=weekday_label(d), key=key, duration_minutes=tidy(by_day.get(key, 0.0))))
    return buckets


def bucket_total(buckets: Sequence[DayBucket]) -> Number:
    return tidy(sum(b.duration_minutes for b in buckets))
