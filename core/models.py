# core/models.py
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from core.constants import ALLOWED_ROLES, ALLOWED_STATUSES, ROLE_ADMIN, ROLE_USER, STATUS_ALIASES, STATUS_PENDING
from core.errors import ValidationError
from core.time_utils import parse_when


@dataclass(frozen=True)
class User:
    id: str
    name: str = ""
    email: str = ""
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> "User":
        role = doc.get("role") or ROLE_USER
        return cls(
            id=str(doc.get("_id", doc.get("id", ""))),
            name=str(doc.get("name") or ""),
            email=str(doc.get("email") or ""),
            role=role if role in ALLOWED_ROLES else ROLE_USER,
        )


# The authenticated caller handed to the core by the auth collaborator.
CurrentUser = User


@dataclass(frozen=True)
class StudySession:
    id: str
    owner_id: str
    title: str
    subject: str
    # raw stored value; metrics coerce anything non-numeric to 0
    duration_minutes: Any = 0
    status: str = STATUS_PENDING
    description: str = ""
    occurred_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def activity_time(self) -> Any:
        return self.occurred_at if self.occurred_at is not None else self.created_at

    def to_dict(self) -> Dict[str, Any]:
        def iso(dt):
            return dt.isoformat() if isinstance(dt, datetime) else dt
        return {
            "id": self.id, "user": self.owner_id, "title": self.title,
            "subject": self.subject, "description": self.description,
            "duration": self.duration_minutes, "status": self.status,
            "date": iso(self.occurred_at), "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


@dataclass(frozen=True)
class SessionInput:
    title: str
    subject: str
    duration_minutes: float
    status: str = STATUS_PENDING
    description: str = ""
    occurred_at: Optional[datetime] = None


# wire name -> python name
PATCHABLE_FIELDS = {
    "title": "title",
    "subject": "subject",
    "description": "description",
    "duration": "duration_minutes",
    "duration_minutes": "duration_minutes",
    "status": "status",
    "date": "occurred_at",
    "occurred_at": "occurred_at",
}


def _clean_text(value: Any, name: str, errors: Dict[str, str], required: bool) -> str:
    if value is None:
        if required:
            errors[name] = f"Please add a {name}"
        return ""
    if not isinstance(value, str):
        errors[name] = f"{name} must be text"
        return ""
    value = value.strip()
    if required and not value:
        errors[name] = f"Please add a {name}"
    return value


def _clean_duration(value: Any, errors: Dict[str, str]) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors["duration"] = "Please add duration"
        return 0.0
    if isinstance(value, bool):
        errors["duration"] = "duration must be a number of minutes"
        return 0.0
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        errors["duration"] = "duration must be a number of minutes"
        return 0.0
    if not math.isfinite(minutes) or minutes < 0:
        errors["duration"] = "duration must be a non-negative number of minutes"
        return 0.0
    return minutes


def _clean_status(value: Any, errors: Dict[str, str]) -> str:
    if value is None or value == "":
        return STATUS_PENDING
    value = STATUS_ALIASES.get(value, value)
    if value not in ALLOWED_STATUSES:
        errors["status"] = f"status must be one of {', '.join(ALLOWED_STATUSES)}"
        return STATUS_PENDING
    return value


def _clean_when(value: Any, errors: Dict[str, str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    dt = parse_when(value)
    if dt is None:
        errors["date"] = "date is not a valid date/time"
    return dt


def validate_session_input(payload: Mapping[str, Any]) -> SessionInput:
    """Validate a creation payload (wire names: title, subject, description,
    duration, status, date)."""
    errors: Dict[str, str] = {}
    title = _clean_text(payload.get("title"), "title", errors, required=True)
    subject = _clean_text(payload.get("subject"), "subject", errors, required=True)
    description = _clean_text(payload.get("description"), "description", errors, required=False)
    duration = payload.get("duration", payload.get("duration_minutes"))
    minutes = _clean_duration(duration, errors)
    status = _clean_status(payload.get("status"), errors)
    occurred_at = _clean_when(payload.get("date", payload.get("occurred_at")), errors)
    if errors:
        raise ValidationError(errors)
    return SessionInput(
        title=title, subject=subject, duration_minutes=minutes,
        status=status, description=description, occurred_at=occurred_at,
    )


def validate_session_patch(patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate an update; returns python field names -> clean values."""
    errors: Dict[str, str] = {}
    out: Dict[str, Any] = {}
    for key, value in patch.items():
        name = PATCHABLE_FIELDS.get(key)
        if name is None:
            errors[key] = "field cannot be updated"
        elif name in ("title", "subject"):
            out[name] = _clean_text(value, name, errors, required=True)
        elif name == "description":
            out[name] = _clean_text(value, name, errors, required=False)
        elif name == "duration_minutes":
            out[name] = _clean_duration(value, errors)
        elif name == "status":
            if value is None or value == "":
                errors["status"] = "status cannot be empty"
            else:
                out[name] = _clean_status(value, errors)
        elif name == "occurred_at":
            when = _clean_when(value, errors)
            if when is None and "date" not in errors:
                errors["date"] = "date cannot be empty"
            out[name] = when
    if errors:
        raise ValidationError(errors)
    return out
