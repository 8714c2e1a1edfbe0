# data_access/users_repo.py
import logging
from typing import List, Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.constants import ALLOWED_ROLES, ROLE_USER
from core.errors import ValidationError
from core.identifiers import is_durable_id
from core.models import User
from data_access.memory_store import MemoryStore

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = {"_id": 1, "name": 1, "email": 1, "role": 1}


class UserDirectory:
    """Users from Mongo when reachable, otherwise the memory store's users.

    Never reads or returns passwords.
    """

    def __init__(self, memory: MemoryStore, collection: Optional[Collection] = None):
        self._memory = memory
        self._col = collection

    def list_all(self) -> List[User]:
        if self._col is not None:
            try:
                return [User.from_doc(d) for d in self._col.find({}, PUBLIC_FIELDS)]
            except PyMongoError as e:
                logger.warning("list_all: durable store unavailable (%s); using memory users", e)
        return self._memory.list_users()

    def get(self, user_id: str) -> Optional[User]:
        if self._col is not None and is_durable_id(user_id):
            try:
                doc = self._col.find_one({"_id": ObjectId(user_id)}, PUBLIC_FIELDS)
            except PyMongoError as e:
                logger.warning("get: durable store unavailable (%s); using memory users", e)
            else:
                if doc:
                    return User.from_doc(doc)
        return self._memory.find_user_by_id(user_id)

    def add(self, name: str, email: str, role: str = ROLE_USER) -> User:
        name, email = (name or "").strip(), (email or "").strip().lower()
        errors = {}
        if not name:
            errors["name"] = "Please add a name"
        if not email or "@" not in email:
            errors["email"] = "Please add a valid email"
        if role not in ALLOWED_ROLES:
            errors["role"] = f"role must be one of {', '.join(ALLOWED_ROLES)}"
        if errors:
            raise ValidationError(errors)

        if self._col is not None:
            try:
                existing = self._col.find_one({"email": email}, PUBLIC_FIELDS)
                if existing:
                    return User.from_doc(existing)
                res = self._col.insert_one({"name": name, "email": email, "role": role})
                return User(id=str(res.inserted_id), name=name, email=email, role=role)
            except PyMongoError as e:
                logger.warning("add: durable store unavailable (%s); saving user to memory store", e)
        existing = self._memory.find_user(email)
        if existing:
            return existing
        return self._memory.add_user(name=name, email=email, role=role)
