#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
DB Health Checker for Study Tracker
Run:
  python -m scripts.check_db_health --uri "mongodb+srv://..." [--db study_tracker] [--fix] [--drop-stray-indexes]
"""

import argparse
import logging
from typing import Any, Dict, List

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import OperationFailure

from core.constants import ALLOWED_STATUSES, SESSIONS_COLLECTION, STATUS_PENDING, USERS_COLLECTION
from core.numbers import as_minutes

logger = logging.getLogger("check_db_health")

EXPECTED_INDEXES = {
    # keys, preferred_name, allowed_alias_names
    SESSIONS_COLLECTION: [
        ({"user": 1, "date": -1}, "user_date", ["user_1_date_-1"]),
    ],
    USERS_COLLECTION: [
        ({"email": 1}, "email", ["email_1"]),
    ],
}


def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--uri", required=True, help="MongoDB connection URI")
    p.add_argument("--db", default="study_tracker", help="Database name")
    p.add_argument("--fix", action="store_true", help="Apply safe fixes (missing indexes, bad status, missing date)")
    p.add_argument("--drop-stray-indexes", action="store_true", help="Drop unknown custom indexes (never _id_)")
    return p.parse_args(argv)


def ensure_expected_indexes(col: Collection, expected_defs, create: bool = False) -> Dict[str, List[str]]:
    """
    Consider an index 'present' if its KEYS match, even under another name.
    Optionally create missing ones with the preferred name.
    """
    current = list(col.list_indexes())
    cur_keys_list = [dict(ix.get("key", {})) for ix in current]

    allowed_names = {"_id_"}
    for _, pref_name, aliases in expected_defs:
        allowed_names.add(pref_name)
        allowed_names.update(aliases)

    present, missing, stray = [], [], []
    for keys, pref_name, _ in expected_defs:
        if any(keys == k for k in cur_keys_list):
            present.append(pref_name)
            continue
        missing.append(pref_name)
        if create:
            try:
                col.create_index(list(keys.items()), name=pref_name)
            except OperationFailure as e:
                logger.warning("Could not create index %s on %s: %s", pref_name, col.name, e)

    for ix in current:
        n = ix.get("name")
        if n not in allowed_names and dict(ix.get("key", {})) != {"_id": 1}:
            stray.append(n)

    return {"present": present, "missing": missing, "stray": stray}


def drop_stray_indexes(col: Collection, stray_names: List[str]) -> int:
    dropped = 0
    for n in stray_names:
        try:
            col.drop_index(n)
            dropped += 1
        except OperationFailure as e:
            logger.warning("Could not drop index %s on %s: %s", n, col.name, e)
    return dropped


def audit_session_doc(doc: Dict[str, Any]) -> List[str]:
    """Problems with one stored session; metrics tolerate all of these."""
    problems = []
    if not str(doc.get("title") or "").strip():
        problems.append("missing_title")
    if not str(doc.get("subject") or "").strip():
        problems.append("missing_subject")
    duration = doc.get("duration")
    if not isinstance(duration, (int, float)) or isinstance(duration, bool):
        problems.append("non_numeric_duration")
    elif as_minutes(duration) < 0:
        problems.append("negative_duration")
    if doc.get("status") not in ALLOWED_STATUSES:
        problems.append("bad_status")
    if doc.get("date") is None:
        problems.append("missing_date")
    return problems


def audit_sessions(col: Collection, fix: bool = False) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for doc in col.find({}):
        problems = audit_session_doc(doc)
        for p in problems:
            counts[p] = counts.get(p, 0) + 1
        if not fix:
            continue
        updates = {}
        if "bad_status" in problems:
            updates["status"] = STATUS_PENDING
        if "missing_date" in problems and doc.get("created_at") is not None:
            updates["date"] = doc["created_at"]
        if updates:
            col.update_one({"_id": doc["_id"]}, {"$set": updates})
            counts["fixed"] = counts.get("fixed", 0) + 1
    return counts


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = parse_args(argv)
    client = MongoClient(args.uri, serverSelectionTimeoutMS=8000)
    client.admin.command("ping")
    db = client[args.db]

    for name, expected in EXPECTED_INDEXES.items():
        summary = ensure_expected_indexes(db[name], expected, create=args.fix)
        logger.info("[%s] indexes present=%s missing=%s stray=%s",
                    name, summary["present"], summary["missing"], summary["stray"])
        if args.drop_stray_indexes and summary["stray"]:
            logger.info("[%s] dropped %d stray indexes", name, drop_stray_indexes(db[name], summary["stray"]))

    counts = audit_sessions(db[SESSIONS_COLLECTION], fix=args.fix)
    if counts:
        for problem, n in sorted(counts.items()):
            logger.info("[%s] %-22s : %d", SESSIONS_COLLECTION, problem, n)
    else:
        logger.info("[%s] all documents look healthy", SESSIONS_COLLECTION)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
