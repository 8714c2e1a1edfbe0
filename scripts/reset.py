#!/usr/bin/env python3
"""
Delete every study session of a single user, keeping the user profile.

Env:
  MONGO_URI   (required)
  DB_NAME     (default: study_tracker)
  USER_ID     (required, 24-hex user id)
  DRY_RUN     (default: true)  -> set to "false" to actually delete
"""
import logging
import os
from datetime import datetime, timezone

from bson import ObjectId
from pymongo.database import Database

from core.config import load_settings
from core.constants import SESSIONS_COLLECTION
from core.db import get_db
from core.identifiers import is_durable_id

logger = logging.getLogger("reset")


def count_sessions(db: Database, user_id: str) -> int:
    return db[SESSIONS_COLLECTION].count_documents({"user": ObjectId(user_id)})


def reset_user(db: Database, user_id: str, dry_run: bool = True) -> int:
    """Returns how many sessions were (or, on a dry run, would be) deleted."""
    if not is_durable_id(user_id):
        raise SystemExit(f"USER_ID must be a 24-hex Mongo id, got {user_id!r}")
    before = count_sessions(db, user_id)
    logger.info("[before] %s sessions for user %s", before, user_id)
    if dry_run:
        logger.info("[dry-run] No deletes performed. Set DRY_RUN=false to apply.")
        return before
    res = db[SESSIONS_COLLECTION].delete_many({"user": ObjectId(user_id)})
    logger.info("[done] deleted %s sessions @ %s", res.deleted_count, datetime.now(timezone.utc).isoformat())
    return res.deleted_count


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = load_settings()
    dry_run = os.getenv("DRY_RUN", "true").lower() != "false"
    logger.info("[cfg] DB=%s USER=%s DRY_RUN=%s", settings.db_name, settings.user_id, dry_run)
    reset_user(get_db(settings), settings.user_id, dry_run=dry_run)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
