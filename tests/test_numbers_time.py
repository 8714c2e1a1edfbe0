"""Tests for rounding, duration coercion, identifiers and local-date helpers."""

from datetime import date, datetime, timedelta, timezone

import pytz

from core.identifiers import is_durable_id
from core.numbers import as_minutes, round_half_up, tidy
from core.time_utils import (
    is_date_only, local_date, local_date_key, localize_wall_clock, parse_when, resolve_tz, to_utc_naive,
    weekday_label, window_dates,
)


class TestRoundHalfUp:
    def test_ties_round_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(2.5) == 3
        assert round_half_up(0.25, 1) == 0.3

    def test_binary_value_is_respected(self):
        # 1.005 is stored as 1.00499...
        assert round_half_up(1.005, 2) == 1.0

    def test_zero_digits_returns_int(self):
        assert isinstance(round_half_up(66.67), int)
        assert round_half_up(66.67) == 67

    def test_non_finite_is_zero(self):
        assert round_half_up(float("nan")) == 0
        assert round_half_up(float("inf"), 1) == 0.0


class TestAsMinutes:
    def test_numbers_and_numeric_strings(self):
        assert as_minutes(30) == 30.0
        assert as_minutes("45") == 45.0
        assert as_minutes(12.5) == 12.5

    def test_garbage_is_zero(self):
        assert as_minutes(None) == 0.0
        assert as_minutes("abc") == 0.0
        assert as_minutes(True) == 0.0
        assert as_minutes(float("inf")) == 0.0
        assert as_minutes({"minutes": 5}) == 0.0

    def test_tidy(self):
        assert tidy(90.0) == 90 and isinstance(tidy(90.0), int)
        assert tidy(12.5) == 12.5


class TestIdentifiers:
    def test_object_id_hex_is_durable(self):
        assert is_durable_id("507f1f77bcf86cd799439011")
        assert is_durable_id("507F1F77BCF86CD799439011")

    def test_everything_else_is_volatile(self):
        assert not is_durable_id("1715760000000")
        assert not is_durable_id("507f1f77bcf86cd79943901")
        assert not is_durable_id("507f1f77bcf86cd79943901z")
        assert not is_durable_id(1715760000000)
        assert not is_durable_id(None)


class TestParseWhen:
    def test_iso_with_trailing_z(self):
        dt = parse_when("2024-05-15T10:00:00Z")
        assert dt == datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        assert parse_when(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_plain_date(self):
        assert parse_when(date(2024, 5, 15)) == datetime(2024, 5, 15)

    def test_unusable_values(self):
        assert parse_when("not a date") is None
        assert parse_when("") is None
        assert parse_when(True) is None
        assert parse_when(None) is None


class TestLocalDates:
    def test_naive_values_are_utc(self):
        kolkata = pytz.timezone("Asia/Kolkata")
        assert local_date(datetime(2024, 5, 15, 20, 0), kolkata) == date(2024, 5, 16)
        assert local_date(datetime(2024, 5, 15, 20, 0), pytz.utc) == date(2024, 5, 15)

    def test_key_and_unreadable_value(self):
        assert local_date_key("2024-05-15T10:00:00Z", pytz.utc) == "2024-05-15"
        assert local_date_key("garbage", pytz.utc) is None

    def test_window_is_oldest_first(self):
        assert window_dates(date(2024, 5, 15), 3) == [date(2024, 5, 13), date(2024, 5, 14), date(2024, 5, 15)]

    def test_weekday_label(self):
        assert weekday_label(date(2024, 5, 18)) == "Sat"
        assert weekday_label(date(2024, 5, 15)) == "Wed"

    def test_to_utc_naive(self):
        aware = datetime(2024, 5, 15, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_utc_naive(aware) == datetime(2024, 5, 15, 8, 0)
        kolkata = pytz.timezone("Asia/Kolkata")
        assert to_utc_naive(datetime(2024, 5, 15, 10, 0), kolkata) == datetime(2024, 5, 15, 4, 30)
        assert to_utc_naive(datetime(2024, 5, 15, 10, 0)) == datetime(2024, 5, 15, 10, 0)

    def test_resolve_tz(self):
        assert resolve_tz("Europe/London").zone == "Europe/London"
        assert resolve_tz("") is not None


class TestWallClock:
    def test_is_date_only(self):
        assert is_date_only("2024-05-14")
        assert is_date_only(date(2024, 5, 14))
        assert not is_date_only("2024-05-14T22:00")
        assert not is_date_only(datetime(2024, 5, 14))
        assert not is_date_only(1715760000000)

    def test_naive_time_is_local(self):
        kolkata = pytz.timezone("Asia/Kolkata")
        dt = localize_wall_clock(datetime(2024, 5, 14, 22, 0), "2024-05-14T22:00", kolkata)
        assert to_utc_naive(dt) == datetime(2024, 5, 14, 16, 30)
        assert local_date(dt, kolkata) == date(2024, 5, 14)

    def test_date_only_is_utc_midnight(self):
        kolkata = pytz.timezone("Asia/Kolkata")
        dt = localize_wall_clock(datetime(2024, 5, 14), "2024-05-14", kolkata)
        assert dt == datetime(2024, 5, 14, tzinfo=timezone.utc)

    def test_offset_is_kept(self):
        aware = datetime(2024, 5, 14, 22, 0, tzinfo=timezone(timedelta(hours=2)))
        assert localize_wall_clock(aware, "2024-05-14T22:00+02:00", pytz.utc) is aware
