"""
Dual-store session repository.

Every call picks its store from the shape of one identifier:

- durable-shaped (Mongo ObjectId hex) and a Mongo store configured: Mongo first;
- anything else: straight to the in-process memory store.

A Mongo failure (RepositoryUnavailable) falls back to the memory store when
the memory store could hold the record. Owner ids always qualify, because
sessions created during an outage are kept in memory under the owner's
durable id. Session ids qualify only when they are not durable-shaped; the
memory store never issues such ids, so a durable-shaped id Mongo cannot
find or reach is a plain not-found.

Creates go to exactly one store.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from core.errors import RepositoryUnavailable
from core.identifiers import is_durable_id
from core.models import SessionInput, StudySession
from data_access.sessions_repo import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionRepository:
    def __init__(self, volatile: MemorySessionStore, durable: Optional[SessionStore] = None):
        self._volatile = volatile
        self._durable = durable

    @property
    def has_durable(self) -> bool:
        return self._durable is not None

    def routes_to_durable(self, identifier: Any) -> bool:
        return self._durable is not None and is_durable_id(identifier)

    def _try_durable(self, op: str, call: Callable[[SessionStore], T]) -> Optional[T]:
        """Run ``call`` on Mongo; None means it was unavailable."""
        try:
            return call(self._durable)
        except RepositoryUnavailable as e:
            logger.warning("%s: durable store unavailable (%s); falling back to memory store", op, e)
            return None

    # ---- owner-scoped ----
    def find_by_owner(self, owner_id: str) -> List[StudySession]:
        if self.routes_to_durable(owner_id):
            found = self._try_durable("find_by_owner", lambda s: s.find_by_owner(owner_id))
            if found is not None:
                return found
        return self._volatile.find_by_owner(owner_id)

    def create(self, owner_id: str, data: SessionInput) -> StudySession:
        if self.routes_to_durable(owner_id):
            created = self._try_durable("create", lambda s: s.create(owner_id, data))
            if created is not None:
                return created
        session = self._volatile.create(owner_id, data)
        logger.info("Saved session %s for %s to memory store", session.id, owner_id)
        return session

    def update(self, session_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[StudySession]:
        if self.routes_to_durable(session_id):
            if not is_durable_id(owner_id):
                return None
            return self._try_durable("update", lambda s: s.update(session_id, owner_id, changes))
        return self._volatile.update(session_id, owner_id, changes)

    def delete(self, session_id: str, owner_id: str) -> bool:
        if self.routes_to_durable(session_id):
            if not is_durable_id(owner_id):
                return False
            return bool(self._try_durable("delete", lambda s: s.delete(session_id, owner_id)))
        return self._volatile.delete(session_id, owner_id)

    # ---- admin ----
    def find_all(self) -> List[StudySession]:
        if self._durable is not None:
            found = self._try_durable("find_all", lambda s: s.find_all())
            if found is not None:
                return found
        return self._volatile.find_all()

    def delete_any(self, session_id: str) -> bool:
        if self.routes_to_durable(session_id):
            return bool(self._try_durable("delete_any", lambda s: s.delete_any(session_id)))
        return self._volatile.delete_any(session_id)
