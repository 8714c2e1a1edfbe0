# core/errors.py
from typing import Dict, Optional


class StudyTrackerError(Exception):
    """Base class for errors raised by the study tracker core."""


class RepositoryUnavailable(StudyTrackerError):
    """The durable store could not be reached or failed mid-operation.

    The session repository absorbs this and retries against the volatile
    store; it should never reach a caller of the repository.
    """


class ValidationError(StudyTrackerError):
    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        super().__init__(message or "; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class PermissionDenied(StudyTrackerError):
    pass


class AnalyticsUnavailable(StudyTrackerError):
    def __init__(self, message: str = "Analytics temporarily unavailable"):
        super().__init__(message)
