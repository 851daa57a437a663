"""
Application-wide exception hierarchy.

Services raise these; the blueprint error handlers registered in
``uptask.blueprints`` translate them to HTTP responses once, so every
endpoint reports the same failure the same way.

Usage:
    from uptask.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=42)
    raise ValidationError("Invalid input", errors=[{"field": "name", "msg": "..."}])
"""

import enum


class NotFoundError(Exception):
    """Raised when a requested resource does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Task").
        resource_id: The PK that was looked up. Logged, not returned to the caller.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class Denial(enum.Enum):
    """How an authorization failure is reported to the caller.

    NOT_FOUND_LIKE: indistinguishable from a missing project (HTTP 404), so
                    outsiders cannot enumerate project ids.
    INVALID_ACTION: the caller can see the project but may not do this
                    (HTTP 400 "Invalid action").
    """

    NOT_FOUND_LIKE = "not_found_like"
    INVALID_ACTION = "invalid_action"


class ForbiddenError(Exception):
    """Raised when the current user lacks the role an operation needs.

    Args:
        message: Caller-facing explanation.
        denial: Reporting policy, see ``Denial``.
    """

    def __init__(self, message: str = "Invalid action", denial: Denial = Denial.INVALID_ACTION) -> None:
        self.denial = denial
        super().__init__(message)


class InvalidActionError(Exception):
    """Raised when entities exist but are not related the way the request implies.

    Example: a task addressed under a project it does not belong to. Maps to 400.
    """

    def __init__(self, message: str = "Invalid action") -> None:
        super().__init__(message)


class ValidationError(Exception):
    """Raised when request input is missing or malformed.

    Args:
        message: Summary line.
        errors: Field-level breakdown, each ``{"field": ..., "msg": ...}``.
    """

    def __init__(self, message: str = "Invalid input", errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class AuthenticationError(Exception):
    """Raised when a protected endpoint is called without a valid identity. Maps to 401."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)
