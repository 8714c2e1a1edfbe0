"""Tests for weak/strong subjects and the consistency score."""

from datetime import datetime

import pytest

from services.classification import classify_subjects, consistency_level, consistency_score
from services.metrics import SubjectStat


def _stats(**minutes):
    return {name: SubjectStat(duration_minutes=m, count=1, completed_count=0) for name, m in minutes.items()}


class TestClassifySubjects:
    def test_split_on_twenty_percent(self):
        result = classify_subjects(_stats(Math=80, Art=15, Bio=5))
        assert [s.subject for s in result.weak] == ["Art", "Bio"]
        assert [s.subject for s in result.strong] == ["Math"]
        assert result.weak[0].to_dict() == {"subject": "Art", "totalTime": 15, "percentage": 15.0}

    def test_exactly_twenty_percent_is_strong(self):
        result = classify_subjects(_stats(A=20, B=80))
        assert result.weak == []
        assert [s.subject for s in result.strong] == ["A", "B"]

    def test_percentage_rounded_to_one_decimal(self):
        result = classify_subjects(_stats(A=1, B=2))
        assert [s.percentage for s in result.strong] == [33.3, 66.7]

    def test_weak_decision_uses_unrounded_share(self):
        # 19.96% displays as 20.0 but is still weak
        result = classify_subjects(_stats(A=499, B=2001))
        assert [s.subject for s in result.weak] == ["A"]
        assert result.weak[0].percentage == 20.0

    def test_no_study_time(self):
        result = classify_subjects(_stats(A=0))
        assert result.to_dict() == {"weakSubjects": [], "strongSubjects": []}

    @pytest.mark.parametrize("minutes", [(1, 1, 1), (7, 11, 13), (1, 2), (3, 3, 3, 3, 3, 3, 3), (1, 97, 2)])
    def test_percentages_sum_to_about_one_hundred(self, minutes):
        stats = {f"S{i}": SubjectStat(duration_minutes=m, count=1, completed_count=0) for i, m in enumerate(minutes)}
        result = classify_subjects(stats)
        shares = result.weak + result.strong
        assert len(shares) == len(minutes)
        assert abs(sum(s.percentage for s in shares) - 100) <= 0.1 * len(minutes)

    def test_same_input_same_output(self):
        stats = _stats(Math=7, Art=11, Bio=13, Chem=2)
        assert classify_subjects(stats) == classify_subjects(stats)


class TestConsistency:
    @pytest.mark.parametrize("score,level", [
        (100, "Excellent"), (71, "Excellent"), (70, "Average"), (41, "Average"), (40, "Poor"), (0, "Poor"),
    ])
    def test_levels(self, score, level):
        assert consistency_level(score) == level

    def test_no_sessions(self, tz, today):
        assert consistency_score([], today, tz).to_dict() == {"consistencyScore": 0, "level": "Poor"}

    def test_every_day(self, make_session, tz, today):
        sessions = [make_session(day=d) for d in (13, 14, 15, 15)]
        assert consistency_score(sessions, today, tz).to_dict() == {"consistencyScore": 100, "level": "Excellent"}

    def test_sparse_days(self, make_session, tz, today):
        sessions = [make_session(day=d) for d in (9, 11, 13, 15)]
        result = consistency_score(sessions, today, tz)
        assert (result.score, result.level) == (57, "Average")

    def test_long_gap(self, make_session, tz, today):
        sessions = [make_session(day=6), make_session(day=15)]
        assert consistency_score(sessions, today, tz).score == 20

    def test_future_only_is_zero(self, make_session, tz, today):
        assert consistency_score([make_session(day=20)], today, tz).score == 0

    def test_ignores_created_at(self, make_session, tz, today):
        session = make_session(day=None, created_at=datetime(2024, 5, 15, 9, 0))
        assert consistency_score([session], today, tz).score == 0

    def test_same_input_same_score(self, make_session, tz, today):
        sessions = [make_session(day=d) for d in (2, 9, 11, 13, 15, 20)]
        first = consistency_score(sessions, today, tz)
        assert consistency_score(sessions, today, tz) == first
        assert first.to_dict() == consistency_score(list(sessions), today, tz).to_dict()
