"""
Cascade deletes for projects and tasks.

Transaction policy: functions issue deletes on the current session and never
commit. The caller commits once, so a cascade and the delete that triggered it
land together.

Order matters: notes are removed before the tasks they reference.
"""

import logging

from uptask.models import db
from uptask.models.note import Note
from uptask.models.task import Task, TaskStatusChange

logger = logging.getLogger(__name__)


def cascade_project_delete(project) -> int:
    """Remove every task of ``project`` together with their notes and history.

    Returns:
        Number of tasks deleted.
    """
    task_ids = [
        row.id for row in db.session.query(Task.id).filter(Task.project_id == project.id).all()
    ]
    if not task_ids:
        return 0

    notes_deleted = (
        Note.query.filter(Note.task_id.in_(task_ids)).delete(synchronize_session="fetch")
    )
    TaskStatusChange.query.filter(TaskStatusChange.task_id.in_(task_ids)).delete(
        synchronize_session="fetch"
    )
    tasks_deleted = Task.query.filter(Task.id.in_(task_ids)).delete(synchronize_session="fetch")

    logger.info(
        "Cascade project %s: removed %d tasks, %d notes",
        project.id, tasks_deleted, notes_deleted,
    )
    return tasks_deleted


def cascade_task_delete(task) -> int:
    """Remove every note of ``task``.

    Status history goes with the task itself (ORM delete-orphan). Removing
    the task id from ``project.task_ids`` is the caller's job.

    Returns:
        Number of notes deleted.
    """
    notes_deleted = Note.query.filter(Note.task_id == task.id).delete(synchronize_session="fetch")
    logger.info("Cascade task %s: removed %d notes", task.id, notes_deleted)
    return notes_deleted
