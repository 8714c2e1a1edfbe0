# services/sessions_service.py
import logging
from dataclasses import replace
from datetime import datetime, tzinfo
from typing import Any, List, Mapping, Optional

from core.constants import ALLOWED_STATUSES, STATUS_ALIASES
from core.errors import PermissionDenied, ValidationError
from core.models import CurrentUser, StudySession, validate_session_input, validate_session_patch
from core.time_utils import localize_wall_clock, resolve_tz
from data_access.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionsService:
    """Study-session CRUD for an authenticated user; not-found is None/False.

    Dates without an offset are read as wall-clock time in ``tz``.
    """

    def __init__(self, repository: SessionRepository, tz: Optional[tzinfo] = None):
        self._repo = repository
        self._tz = tz or resolve_tz()

    def _when(self, payload: Mapping[str, Any], when: Optional[datetime]) -> Optional[datetime]:
        if when is None:
            return None
        return localize_wall_clock(when, payload.get("date", payload.get("occurred_at")), self._tz)

    def log_session(self, user: CurrentUser, payload: Mapping[str, Any]) -> StudySession:
        data = validate_session_input(payload)
        data = replace(data, occurred_at=self._when(payload, data.occurred_at))
        session = self._repo.create(user.id, data)
        logger.info("User %s logged %s min of %s (session %s)",
                    user.id, data.duration_minutes, data.subject, session.id)
        return session

    def list_sessions(self, user: CurrentUser, search: Optional[str] = None,
                      status: Optional[str] = None) -> List[StudySession]:
        sessions = self._repo.find_by_owner(user.id)
        if status:
            status = STATUS_ALIASES.get(status, status)
            if status not in ALLOWED_STATUSES:
                raise ValidationError({"status": f"status must be one of {', '.join(ALLOWED_STATUSES)}"})
            sessions = [s for s in sessions if s.status == status]
        term = (search or "").strip().lower()
        if term:
            sessions = [s for s in sessions
                        if term in str(s.title or "").lower() or term in str(s.subject or "").lower()]
        return sessions

    def update_session(self, user: CurrentUser, session_id: str,
                       patch: Mapping[str, Any]) -> Optional[StudySession]:
        changes = validate_session_patch(patch)
        if not changes:
            raise ValidationError({"patch": "nothing to update"})
        if "occurred_at" in changes:
            changes["occurred_at"] = self._when(patch, changes["occurred_at"])
        updated = self._repo.update(session_id, user.id, changes)
        if updated is None:
            logger.info("Update: session %s not found for user %s", session_id, user.id)
        return updated

    def delete_session(self, user: CurrentUser, session_id: str) -> bool:
        deleted = self._repo.delete(session_id, user.id)
        if not deleted:
            logger.info("Delete: session %s not found for user %s", session_id, user.id)
        return deleted

    # ---- admin ----
    def list_all_sessions(self, admin: CurrentUser) -> List[StudySession]:
        _require_admin(admin)
        return self._repo.find_all()

    def delete_any_session(self, admin: CurrentUser, session_id: str) -> bool:
        _require_admin(admin)
        deleted = self._repo.delete_any(session_id)
        logger.info("Admin %s deleted session %s: %s", admin.id, session_id, deleted)
        return deleted


def _require_admin(user: CurrentUser) -> None:
    if not user.is_admin:
        raise PermissionDenied("Admin access required")
