# core/identifiers.py
import re
from typing import Any

# MongoDB ObjectId hex form; anything else belongs to the in-process store.
DURABLE_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def is_durable_id(value: Any) -> bool:
    return isinstance(value, str) and bool(DURABLE_ID_RE.match(value))
