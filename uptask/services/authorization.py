"""
Authorization rules for projects and everything nested under them.

Two capabilities, both pure functions of (user id, project):

  is_manager  the project's single owner. Required to edit or delete the
                project, to create/edit/delete tasks and to change the team.
  is_member   manager or team member. Required for every read under the
                project, for status updates and for notes.

Denials carry a ``Denial`` policy; ``classify`` turns it into the HTTP
status the caller sees. Project-level denials look exactly like a missing
project, so a caller cannot tell the two apart.
"""

import logging

from uptask.core.exceptions import Denial, ForbiddenError

logger = logging.getLogger(__name__)

_DENIAL_STATUS = {
    Denial.NOT_FOUND_LIKE: 404,
    Denial.INVALID_ACTION: 400,
}


def is_manager(user_id: int | None, project) -> bool:
    return user_id is not None and project.manager_id == user_id


def is_member(user_id: int | None, project) -> bool:
    if user_id is None:
        return False
    return is_manager(user_id, project) or user_id in project.team_ids


def require_member(user_id: int | None, project) -> None:
    """Raise unless the user may read the project. Denial is hidden as 404."""
    if not is_member(user_id, project):
        logger.warning("User %s denied read on project %s: not a member", user_id, project.id)
        raise ForbiddenError("Project not found", denial=Denial.NOT_FOUND_LIKE)


def require_manager(
    user_id: int | None,
    project,
    *,
    message: str = "Invalid action",
    denial: Denial = Denial.INVALID_ACTION,
) -> None:
    """Raise unless the user manages the project.

    Args:
        message: Caller-facing text for the denial.
        denial: NOT_FOUND_LIKE for project-level endpoints, INVALID_ACTION
                for task and team mutations.
    """
    if not is_manager(user_id, project):
        logger.warning(
            "User %s denied manager action on project %s (%s)",
            user_id, project.id, denial.value,
        )
        raise ForbiddenError(message, denial=denial)


def classify(error: ForbiddenError) -> int:
    """Return the HTTP status used to report an authorization failure."""
    return _DENIAL_STATUS[error.denial]
