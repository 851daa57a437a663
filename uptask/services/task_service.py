"""Task service layer: task CRUD and status tracking.

Transaction policy: methods use flush() for ID generation, never commit().
Caller (route handler) is responsible for db.session.commit().

Extracted operations:
- Task create/update/delete, keeping ``Project.task_ids`` in step
- Status update with append-only history (``Task.completed_by``)
- Ordered loading for populated project views
"""

from __future__ import annotations

import logging

from uptask.core.exceptions import ValidationError
from uptask.models import db
from uptask.models.project import Project
from uptask.models.task import TASK_STATUSES, Task, TaskStatusChange
from uptask.services import note_service
from uptask.services.cascade import cascade_task_delete

logger = logging.getLogger(__name__)


def create_task(project: Project, data: dict) -> Task:
    """Create a task and append its id to the project's task list."""
    task = Task(
        name=data["name"].strip(),
        description=data["description"].strip(),
        project_id=project.id,
        note_ids=[],
    )
    db.session.add(task)
    db.session.flush()

    # JSON columns are only persisted on reassignment
    project.task_ids = [*(project.task_ids or []), task.id]
    db.session.flush()
    logger.info("Task %s created in project %s", task.id, project.id)
    return task


def list_project_tasks(project: Project) -> list[Task]:
    return Task.query.filter_by(project_id=project.id).order_by(Task.id).all()


def load_tasks_in_order(task_ids: list[int]) -> list[Task]:
    """Fetch tasks by id, preserving ``task_ids`` order. Dangling ids are skipped."""
    if not task_ids:
        return []
    by_id = {t.id: t for t in Task.query.filter(Task.id.in_(task_ids)).all()}
    return [by_id[tid] for tid in task_ids if tid in by_id]


def serialize_task(task: Task, *, include_project: bool = False) -> dict:
    """Task dict with status-history users and notes (with authors) populated."""
    notes = note_service.load_notes_in_order(task.note_ids or [])
    return task.to_dict(notes=[n.to_dict() for n in notes], include_project=include_project)


def update_task(task: Task, data: dict) -> Task:
    task.name = data["name"].strip()
    task.description = data["description"].strip()
    db.session.flush()
    return task


def delete_task(project: Project, task: Task) -> None:
    """Delete a task, its notes, and its reference in the project."""
    cascade_task_delete(task)
    project.task_ids = [tid for tid in (project.task_ids or []) if tid != task.id]
    db.session.delete(task)
    db.session.flush()
    logger.info("Task %s deleted from project %s", task.id, project.id)


def update_status(task: Task, new_status: str, acting_user_id: int | None) -> Task:
    """Set the task status and append ``{user, status}`` to its history.

    Any status may follow any other, including leaving ``completed``.

    Raises:
        ValidationError: ``new_status`` is not a known status.
    """
    if new_status not in TASK_STATUSES:
        raise ValidationError(
            "Invalid status",
            errors=[{"field": "status", "msg": f"status must be one of: {', '.join(TASK_STATUSES)}"}],
        )

    task.status = new_status
    task.completed_by.append(TaskStatusChange(user_id=acting_user_id, status=new_status))
    db.session.flush()
    logger.info("Task %s moved to %s by user %s", task.id, new_status, acting_user_id)
    return task
