# data_access/memory_store.py
import logging
import threading
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from core.models import SessionInput, StudySession, User
from core.time_utils import to_utc_naive, utc_now_naive

logger = logging.getLogger(__name__)


class MemoryStore:
    """Process-lifetime fallback storage for users and study sessions.

    Build one per process and hand it to the repositories; nothing here
    survives a restart. Ids are millisecond timestamps, bumped so they stay
    strictly increasing within the process.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._sessions: Dict[str, StudySession] = {}
        self._last_id = 0

    def new_id(self) -> str:
        with self._lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return str(candidate)

    def reset(self) -> None:
        with self._lock:
            self._users.clear()
            self._sessions.clear()

    # ---- users ----
    def add_user(self, name: str, email: str, role: str = "user", user_id: Optional[str] = None) -> User:
        with self._lock:
            user = User(id=user_id or self.new_id(), name=name, email=email, role=role)
            self._users[user.id] = user
            return user

    def find_user(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_users(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    # ---- sessions ----
    def add_session(self, owner_id: str, data: SessionInput) -> StudySession:
        with self._lock:
            now = utc_now_naive()
            session = StudySession(
                id=self.new_id(), owner_id=owner_id,
                title=data.title, subject=data.subject, description=data.description,
                duration_minutes=data.duration_minutes, status=data.status,
                occurred_at=to_utc_naive(data.occurred_at) if data.occurred_at else now,
                created_at=now, updated_at=now,
            )
            self._sessions[session.id] = session
            return session

    def get_session(self, session_id: str) -> Optional[StudySession]:
        with self._lock:
            return self._sessions.get(session_id)

    def sessions_for(self, owner_id: str) -> List[StudySession]:
        with self._lock:
            return [s for s in self._sessions.values() if s.owner_id == owner_id]

    def all_sessions(self) -> List[StudySession]:
        with self._lock:
            return list(self._sessions.values())

    def update_session(self, session_id: str, changes: Dict[str, Any]) -> Optional[StudySession]:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                return None
            changes = dict(changes)
            if changes.get("occurred_at") is not None:
                changes["occurred_at"] = to_utc_naive(changes["occurred_at"])
            updated = replace(current, updated_at=utc_now_naive(), **changes)
            self._sessions[session_id] = updated
            return updated

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None
