# core/db.py
import logging

import certifi
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from core.config import Settings
from core.constants import SESSIONS_COLLECTION, USERS_COLLECTION
from core.errors import RepositoryUnavailable

logger = logging.getLogger(__name__)

SESSION_INDEXES = [
    ([("user", ASCENDING), ("date", DESCENDING)], "user_date"),
]
USER_INDEXES = [
    ([("email", ASCENDING)], "email"),
]


def get_db(settings: Settings) -> Database:
    """Connect and ping; raises RepositoryUnavailable when Mongo is not usable."""
    uri = settings.mongo_uri.strip()
    if not uri:
        raise RepositoryUnavailable("MONGO_URI is not configured.")
    try:
        client = MongoClient(uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms, tlsCAFile=certifi.where())
        client.admin.command("ping")
    except PyMongoError as e:
        raise RepositoryUnavailable(f"Could not connect to MongoDB: {e}") from e
    logger.info("Connected to MongoDB database %s", settings.db_name)
    return client[settings.db_name]


def ensure_indexes(db: Database) -> None:
    try:
        for keys, name in SESSION_INDEXES:
            db[SESSIONS_COLLECTION].create_index(keys, name=name)
        for keys, name in USER_INDEXES:
            db[USERS_COLLECTION].create_index(keys, name=name)
    except PyMongoError as e:
        raise RepositoryUnavailable(f"Could not create indexes: {e}") from e
