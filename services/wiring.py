# services/wiring.py
import logging
from dataclasses import dataclass
from typing import Optional

from pymongo.database import Database

from core.config import Settings
from core.constants import SESSIONS_COLLECTION, USERS_COLLECTION
from core.db import get_db
from core.errors import RepositoryUnavailable
from core.time_utils import resolve_tz
from data_access.memory_store import MemoryStore
from data_access.session_repository import SessionRepository
from data_access.sessions_repo import MemorySessionStore, MongoSessionStore
from data_access.users_repo import UserDirectory
from services.analytics_service import AnalyticsService
from services.sessions_service import SessionsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    repository: SessionRepository
    users: UserDirectory
    sessions: SessionsService
    analytics: AnalyticsService
    db: Optional[Database] = None


def connect_or_none(settings: Settings) -> Optional[Database]:
    if not settings.durable_enabled:
        logger.info("MONGO_URI not set; running on the memory store only")
        return None
    try:
        return get_db(settings)
    except RepositoryUnavailable as e:
        logger.warning("%s; running on the memory store only", e)
        return None


def build_services(settings: Settings, memory: MemoryStore, db: Optional[Database] = None) -> Services:
    durable = MongoSessionStore(db[SESSIONS_COLLECTION]) if db is not None else None
    repository = SessionRepository(MemorySessionStore(memory), durable)
    users = UserDirectory(memory, db[USERS_COLLECTION] if db is not None else None)
    tz = resolve_tz(settings.app_tz)
    return Services(
        repository=repository,
        users=users,
        sessions=SessionsService(repository, tz=tz),
        analytics=AnalyticsService(repository, users, tz=tz),
        db=db,
    )
