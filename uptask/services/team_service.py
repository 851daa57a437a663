"""Team membership management for a project.

Transaction policy: flush only; the route handler commits.
"""

from __future__ import annotations

import logging

from uptask.core.exceptions import InvalidActionError, NotFoundError
from uptask.models import db
from uptask.models.auth import User
from uptask.models.project import Project

logger = logging.getLogger(__name__)


def list_team(project: Project) -> list[User]:
    return list(project.team)


def add_member(project: Project, user_id: int) -> bool:
    """Add a user to the team.

    Idempotent: adding someone already on the team changes nothing.

    Returns:
        True if the team changed.

    Raises:
        NotFoundError: no user with that id.
        InvalidActionError: the user manages the project.
    """
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError(resource="User", resource_id=user_id)

    if user.id == project.manager_id:
        logger.warning("Manager %s cannot join the team of project %s", user.id, project.id)
        raise InvalidActionError("The manager cannot be added to the team")

    if user.id in project.team_ids:
        logger.debug("User %s already on team of project %s", user.id, project.id)
        return False

    project.team.append(user)
    db.session.flush()
    logger.info("User %s added to team of project %s", user.id, project.id)
    return True


def remove_member(project: Project, user_id: int) -> None:
    """Remove a user from the team.

    Raises:
        NotFoundError: the user is not on the team.
    """
    member = next((u for u in project.team if u.id == user_id), None)
    if member is None:
        raise NotFoundError(resource="Team member", resource_id=user_id)

    project.team.remove(member)
    db.session.flush()
    logger.info("User %s removed from team of project %s", user_id, project.id)
