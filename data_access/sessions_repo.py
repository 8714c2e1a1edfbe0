# data_access/sessions_repo.py
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.constants import STATUS_PENDING
from core.errors import RepositoryUnavailable
from core.models import SessionInput, StudySession
from core.time_utils import to_utc_naive, utc_now_naive
from data_access.memory_store import MemoryStore

logger = logging.getLogger(__name__)

# python field -> Mongo document field
DOC_FIELDS = {
    "title": "title",
    "subject": "subject",
    "description": "description",
    "duration_minutes": "duration",
    "status": "status",
    "occurred_at": "date",
}


class SessionStore(ABC):
    """Owner-scoped CRUD over study sessions. ``None``/``False`` mean not found."""

    name = "store"

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> List[StudySession]: ...

    @abstractmethod
    def find_all(self) -> List[StudySession]: ...

    @abstractmethod
    def create(self, owner_id: str, data: SessionInput) -> StudySession: ...

    @abstractmethod
    def update(self, session_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[StudySession]: ...

    @abstractmethod
    def delete(self, session_id: str, owner_id: str) -> bool: ...

    @abstractmethod
    def delete_any(self, session_id: str) -> bool: ...


def _newest_first(sessions: List[StudySession]) -> List[StudySession]:
    def key(s: StudySession):
        when = s.activity_time
        return when if isinstance(when, datetime) and when.tzinfo is None else datetime.min
    return sorted(sessions, key=key, reverse=True)


class MemorySessionStore(SessionStore):
    name = "memory"

    def __init__(self, memory: MemoryStore):
        self._memory = memory

    def find_by_owner(self, owner_id: str) -> List[StudySession]:
        return _newest_first(self._memory.sessions_for(owner_id))

    def find_all(self) -> List[StudySession]:
        return _newest_first(self._memory.all_sessions())

    def create(self, owner_id: str, data: SessionInput) -> StudySession:
        return self._memory.add_session(owner_id, data)

    def update(self, session_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[StudySession]:
        current = self._memory.get_session(session_id)
        if current is None or current.owner_id != owner_id:
            return None
        return self._memory.update_session(session_id, changes)

    def delete(self, session_id: str, owner_id: str) -> bool:
        current = self._memory.get_session(session_id)
        if current is None or current.owner_id != owner_id:
            return False
        return self._memory.delete_session(session_id)

    def delete_any(self, session_id: str) -> bool:
        return self._memory.delete_session(session_id)


def session_from_doc(doc: Mapping[str, Any]) -> StudySession:
    return StudySession(
        id=str(doc["_id"]),
        owner_id=str(doc.get("user", "")),
        title=doc.get("title") or "",
        subject=doc.get("subject") or "",
        description=doc.get("description") or "",
        duration_minutes=doc.get("duration"),
        status=doc.get("status") or STATUS_PENDING,
        occurred_at=doc.get("date"),
        created_at=doc.get("created_at") or doc.get("createdAt"),
        updated_at=doc.get("updated_at") or doc.get("updatedAt"),
    )


class MongoSessionStore(SessionStore):
    """Sessions in the ``studies`` collection. Every driver error becomes
    RepositoryUnavailable so the caller can fall back."""

    name = "mongo"

    def __init__(self, collection: Collection):
        self._col = collection

    def find_by_owner(self, owner_id: str) -> List[StudySession]:
        try:
            docs = list(self._col.find({"user": ObjectId(owner_id)}).sort("date", DESCENDING))
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        return [session_from_doc(d) for d in docs]

    def find_all(self) -> List[StudySession]:
        try:
            docs = list(self._col.find({}).sort("date", DESCENDING))
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        return [session_from_doc(d) for d in docs]

    def create(self, owner_id: str, data: SessionInput) -> StudySession:
        now = utc_now_naive()
        doc = {
            "user": ObjectId(owner_id),
            "title": data.title,
            "subject": data.subject,
            "description": data.description,
            "duration": data.duration_minutes,
            "status": data.status,
            "date": to_utc_naive(data.occurred_at) if data.occurred_at else now,
            "created_at": now,
            "updated_at": now,
        }
        try:
            res = self._col.insert_one(doc)
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        doc["_id"] = res.inserted_id
        return session_from_doc(doc)

    def update(self, session_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[StudySession]:
        updates = {}
        for name, value in changes.items():
            if name == "occurred_at" and value is not None:
                value = to_utc_naive(value)
            updates[DOC_FIELDS[name]] = value
        updates["updated_at"] = utc_now_naive()
        try:
            doc = self._col.find_one_and_update(
                {"_id": ObjectId(session_id), "user": ObjectId(owner_id)},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        return session_from_doc(doc) if doc else None

    def delete(self, session_id: str, owner_id: str) -> bool:
        try:
            res = self._col.delete_one({"_id": ObjectId(session_id), "user": ObjectId(owner_id)})
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        return res.deleted_count == 1

    def delete_any(self, session_id: str) -> bool:
        try:
            res = self._col.delete_one({"_id": ObjectId(session_id)})
        except PyMongoError as e:
            raise RepositoryUnavailable(str(e)) from e
        return res.deleted_count == 1
