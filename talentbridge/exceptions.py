"""Error taxonomy for the candidate lifecycle engine.

Every error carries a ``kind`` (rendered as the ``error`` field of the API
envelope) and the HTTP status it maps to.
"""

from typing import Optional


class LifecycleError(Exception):
    """Base class for recoverable engine errors."""

    kind = "LifecycleError"
    status_code = 400

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "status": self.status_code,
            "details": self.details,
        }


class NotFound(LifecycleError):
    """Entity absent, or not visible to the caller."""

    kind = "NotFound"
    status_code = 404


class Forbidden(LifecycleError):
    """Actor lacks the role or ownership for the requested operation."""

    kind = "Forbidden"
    status_code = 403


class InvalidTransition(LifecycleError):
    """Target status is not reachable from the current status."""

    kind = "InvalidTransition"
    status_code = 400

    def __init__(self, current: str, target: str, message: Optional[str] = None):
        super().__init__(
            message or f"Transition {current} -> {target} is not allowed",
            {"current_status": current, "next_status": target},
        )
        self.current = current
        self.target = target


class InvalidInput(LifecycleError):
    """Malformed or missing required field."""

    kind = "InvalidInput"
    status_code = 400


class ConflictRetry(LifecycleError):
    """Optimistic concurrency check failed; the candidate changed underneath us."""

    kind = "ConflictRetry"
    status_code = 409
