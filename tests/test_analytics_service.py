"""End-to-end tests for the analytics views over the memory store."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from core.errors import AnalyticsUnavailable
from core.models import SessionInput
from services.analytics_service import AnalyticsService, Totals, combine_totals


def _log(memory, owner, subject, minutes, status, day):
    return memory.add_session(owner, SessionInput(
        title=f"{subject} block", subject=subject, duration_minutes=minutes,
        status=status, occurred_at=datetime(2024, 5, day, 10, 0)))


@pytest.fixture
def studied(memory, student):
    _log(memory, student.id, "Math", 40, "Completed", 15)
    _log(memory, student.id, "Math", 30, "Completed", 14)
    _log(memory, student.id, "Physics", 20, "Completed", 13)
    _log(memory, student.id, "Art", 10, "Pending", 11)
    return student


class TestNewUser:
    def test_overview(self, analytics, student):
        out = analytics.get_overview(student.id).to_dict()
        assert out["totalHours"] == 0.0
        assert out["totalSessions"] == 0
        assert out["completedSessions"] == 0
        assert out["completionRate"] == 0
        assert out["subjectStats"] == {}
        assert len(out["weeklyActivity"]) == 7
        assert all(day["duration"] == 0 for day in out["weeklyActivity"])
        assert out["insights"] == []

    def test_other_views(self, analytics, student):
        assert analytics.get_weak_strong_subjects(student.id).to_dict() == {"weakSubjects": [], "strongSubjects": []}
        assert analytics.get_consistency_score(student.id).to_dict() == {"consistencyScore": 0, "level": "Poor"}
        assert analytics.get_recommendations(student.id).to_dict() == {"recommendations": []}


class TestActiveUser:
    def test_overview(self, analytics, studied):
        out = analytics.get_overview(studied.id).to_dict()
        assert out["totalHours"] == 1.7
        assert out["totalSessions"] == 4
        assert out["completedSessions"] == 3
        assert out["completionRate"] == 75
        assert list(out["subjectStats"]) == ["Math", "Physics", "Art"]
        assert out["subjectStats"]["Math"] == {"duration": 70, "count": 2, "completed": 2}
        week = {d["fullDate"]: d["duration"] for d in out["weeklyActivity"]}
        assert week["2024-05-15"] == 40
        assert week["2024-05-11"] == 10
        assert out["insights"] == [
            "Art needs more focus (Completion rate: 0%)",
            "Consistent weekday study habits detected",
        ]

    def test_subjects(self, analytics, studied):
        result = analytics.get_weak_strong_subjects(studied.id)
        assert [(s.subject, s.percentage) for s in result.weak] == [("Art", 10.0)]
        assert [(s.subject, s.percentage) for s in result.strong] == [("Math", 70.0), ("Physics", 20.0)]

    def test_consistency(self, analytics, studied):
        # 4 active days out of May 11..15
        assert analytics.get_consistency_score(studied.id).to_dict() == {"consistencyScore": 80, "level": "Excellent"}

    def test_recommendations(self, analytics, studied):
        messages = analytics.get_recommendations(studied.id).messages
        assert len(messages) == 2
        assert messages[0].startswith("Increase focused study time for weaker subjects: Art.")
        assert messages[1].startswith("Your completion rate is decent.")

    def test_dashboard_merges_every_view(self, analytics, studied):
        out = analytics.get_dashboard(studied.id).to_dict()
        assert out["totalHours"] == 1.7
        assert [s["subject"] for s in out["weakSubjects"]] == ["Art"]
        assert out["consistencyScore"] == 80
        assert len(out["recommendations"]) == 2

    def test_views_are_scoped_to_owner(self, analytics, studied, memory):
        _log(memory, "someone-else", "Math", 600, "Pending", 15)
        assert analytics.get_overview(studied.id).total_sessions == 4


class TestTwoSubjects:
    @pytest.fixture
    def math_and_art(self, memory, student):
        for day in (13, 14, 15):
            _log(memory, student.id, "Math", 30, "Completed", day)
        _log(memory, student.id, "Art", 10, "Pending", 15)
        return student

    def test_math_strong_art_weak(self, analytics, math_and_art):
        out = analytics.get_dashboard(math_and_art.id).to_dict()
        assert out["totalHours"] == 1.7
        assert out["completionRate"] == 75
        assert out["strongSubjects"] == [{"subject": "Math", "totalTime": 90, "percentage": 90.0}]
        assert out["weakSubjects"] == [{"subject": "Art", "totalTime": 10, "percentage": 10.0}]
        assert out["recommendations"][0].startswith("Increase focused study time for weaker subjects: Art.")
        assert not any(m.startswith("Less than half") for m in out["recommendations"])
        assert any(m.startswith("Your completion rate is decent.") for m in out["recommendations"])


def test_four_active_days_out_of_ten_is_poor(analytics, memory, student):
    for day in (6, 8, 12, 15):
        _log(memory, student.id, "Math", 25, "Completed", day)
    assert analytics.get_consistency_score(student.id).to_dict() == {"consistencyScore": 40, "level": "Poor"}


class TestFailures:
    def test_repository_failure_is_analytics_unavailable(self, users, tz, clock, caplog):
        repo = MagicMock()
        repo.find_by_owner.side_effect = RuntimeError("boom")
        service = AnalyticsService(repo, users, tz=tz, clock=clock)
        for view in (service.get_overview, service.get_weak_strong_subjects,
                     service.get_consistency_score, service.get_recommendations, service.get_dashboard):
            with pytest.raises(AnalyticsUnavailable) as exc:
                view("u1")
            assert str(exc.value) == "Analytics temporarily unavailable"
            assert isinstance(exc.value.__cause__, RuntimeError)
        assert "analytics failed for u1" in caplog.text

    def test_admin_rollup_failure(self, repository, tz, clock):
        users = MagicMock()
        users.list_all.side_effect = RuntimeError("boom")
        with pytest.raises(AnalyticsUnavailable):
            AnalyticsService(repository, users, tz=tz, clock=clock).get_admin_rollup()


class TestAdminRollup:
    def test_global_totals_from_per_user_figures(self, analytics, memory, student, admin):
        _log(memory, student.id, "Math", 50, "Completed", 15)
        _log(memory, admin.id, "Bio", 50, "Pending", 14)
        rollup = analytics.get_admin_rollup().to_dict()
        assert [u["totalHours"] for u in rollup["perUser"]] == [0.8, 0.8]
        # sum of rounded per-user hours, not 100 minutes -> 1.7
        assert rollup["global"] == {"totalHours": 1.6, "totalSessions": 2,
                                    "completedSessions": 1, "completionRate": 50}
        assert rollup["perUser"][0]["user"]["email"] == "asha@example.com"

    def test_combine_nothing(self):
        assert combine_totals([]) == Totals(0.0, 0, 0, 0)

    def test_combine_rate_uses_summed_counts(self):
        out = combine_totals([Totals(1.0, 1, 1, 100), Totals(2.0, 3, 0, 0)])
        assert out.completion_rate == 25
        assert out.total_hours == 3.0
