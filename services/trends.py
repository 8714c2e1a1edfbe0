# services/trends.py
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Any, Dict, Sequence

from core.constants import WEEK_DAYS
from core.models import StudySession
from core.numbers import Number
from services.metrics import bucket_total, daily_buckets


@dataclass(frozen=True)
class Trend:
    current_total: Number
    previous_total: Number

    @property
    def declining(self) -> bool:
        return self.current_total < self.previous_total

    def to_dict(self) -> Dict[str, Any]:
        return {"currentTotal": self.current_total, "previousTotal": self.previous_total}


def recent_trend(sessions: Sequence[StudySession], today: date, tz: tzinfo,
                 window_days: int = WEEK_DAYS) -> Trend:
    """Minutes in the last ``window_days`` vs the ``window_days`` before them."""
    current = daily_buckets(sessions, window_days, today, tz)
    previous = daily_buckets(sessions, window_days * 2, today, tz)[:window_days]
    return Trend(current_total=bucket_total(current), previous_total=bucket_total(previous))
