# core/time_utils.py
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, List, Optional

import pytz

from core.constants import WEEKDAY_LABELS

DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def resolve_tz(name: str = "") -> tzinfo:
    """Configured zone, or the server process's own zone when unset.

    Every user shares this zone: there is no per-user time zone.
    """
    if name:
        return pytz.timezone(name)
    return datetime.now().astimezone().tzinfo


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_local(tz: tzinfo) -> datetime:
    return datetime.now(timezone.utc).astimezone(tz)


def to_utc_naive(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return UTC-naive datetime for Mongo 'date' type.

    Naive input is read as wall-clock time in ``tz`` (UTC if not given).
    """
    if dt.tzinfo is None:
        if tz is None:
            return dt
        dt = tz.localize(dt) if hasattr(tz, "localize") else dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_when(value: Any) -> Optional[datetime]:
    """Best-effort conversion of a stored date to a datetime; None if unusable."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            return None
    return None


def to_local(value: Any, tz: tzinfo) -> Optional[datetime]:
    """Make any stored datetime (usually UTC-naive from Mongo) aware in ``tz``."""
    dt = parse_when(value)
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(tz)
    except (OverflowError, ValueError):
        return None


def local_date(value: Any, tz: tzinfo) -> Optional[date]:
    dt = to_local(value, tz)
    return dt.date() if dt is not None else None


def local_date_key(value: Any, tz: tzinfo) -> Optional[str]:
    d = local_date(value, tz)
    return d.isoformat() if d is not None else None


def weekday_label(d: date) -> str:
    return WEEKDAY_LABELS[d.weekday()]


def window_dates(reference: date, days: int) -> List[date]:
    """``days`` consecutive dates ending at ``reference`` inclusive, oldest first."""
    return [reference - timedelta(days=i) for i in range(days - 1, -1, -1)]


def is_date_only(value: Any) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and bool(DATE_ONLY_RE.match(value.strip()))


def localize_wall_clock(dt: datetime, raw: Any, tz: tzinfo) -> datetime:
    """Give a parsed user-supplied time its zone.

    Values with an offset keep it. Date-only values ("2024-05-14") are UTC
    midnight, like JavaScript's Date; any other naive value is wall-clock
    time in ``tz``.
    """
    if dt.tzinfo is not None:
        return dt
    if is_date_only(raw):
        return dt.replace(tzinfo=timezone.utc)
    return tz.localize(dt) if hasattr(tz, "localize") else dt.replace(tzinfo=tz)
