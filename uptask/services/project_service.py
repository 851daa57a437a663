"""Project CRUD service.

Transaction policy: functions use flush(), never commit().
Caller (route handler) is responsible for committing.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_

from uptask.models import db
from uptask.models.auth import User
from uptask.models.project import Project
from uptask.services import task_service
from uptask.services.cascade import cascade_project_delete

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    ("projectName", "project_name"),
    ("clientName", "client_name"),
    ("description", "description"),
)


def create_project(*, manager_id: int, data: dict) -> Project:
    """Create a project owned by ``manager_id``."""
    project = Project(
        project_name=data["projectName"].strip(),
        client_name=data["clientName"].strip(),
        description=data["description"].strip(),
        manager_id=manager_id,
        task_ids=[],
    )
    db.session.add(project)
    db.session.flush()
    logger.info("Project %s created by user %s", project.id, manager_id)
    return project


def list_projects_for_user(user_id: int) -> list[Project]:
    """Projects the user manages or is on the team of, oldest first."""
    return (
        Project.query
        .filter(or_(Project.manager_id == user_id, Project.team.any(User.id == user_id)))
        .order_by(Project.created_at.asc(), Project.id.asc())
        .all()
    )


def serialize_project(project: Project) -> dict:
    """Project dict with tasks populated (history users and notes included)."""
    tasks = task_service.load_tasks_in_order(project.task_ids or [])
    return project.to_dict(tasks=[task_service.serialize_task(t) for t in tasks])


def update_project(project: Project, data: dict) -> Project:
    """Overwrite name, client and description. No version check: last write wins."""
    for key, attr in EDITABLE_FIELDS:
        setattr(project, attr, data[key].strip())
    db.session.flush()
    return project


def delete_project(project: Project) -> None:
    """Delete a project after cascading to its tasks and their notes."""
    cascade_project_delete(project)
    db.session.delete(project)
    db.session.flush()
    logger.info("Project %s deleted", project.id)
