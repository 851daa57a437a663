"""Note service: comments on tasks.

Transaction policy: flush only; the route handler commits.
"""

from __future__ import annotations

import logging

from uptask.core.exceptions import Denial, ForbiddenError
from uptask.models import db
from uptask.models.note import Note

logger = logging.getLogger(__name__)


def create_note(task, user_id: int, content: str) -> Note:
    """Create a note on ``task`` and append its id to ``task.note_ids``."""
    note = Note(content=content.strip(), created_by=user_id, task_id=task.id)
    db.session.add(note)
    db.session.flush()

    task.note_ids = [*(task.note_ids or []), note.id]
    db.session.flush()
    return note


def list_task_notes(task) -> list[Note]:
    return Note.query.filter_by(task_id=task.id).order_by(Note.id).all()


def load_notes_in_order(note_ids: list[int]) -> list[Note]:
    """Fetch notes by id, preserving ``note_ids`` order. Dangling ids are skipped."""
    if not note_ids:
        return []
    by_id = {n.id: n for n in Note.query.filter(Note.id.in_(note_ids)).all()}
    return [by_id[nid] for nid in note_ids if nid in by_id]


def delete_note(task, note: Note, user_id: int) -> None:
    """Delete a note. Only its author may do so.

    Raises:
        ForbiddenError: the user did not write the note.
    """
    if note.created_by != user_id:
        logger.warning("User %s denied deleting note %s (author %s)", user_id, note.id, note.created_by)
        raise ForbiddenError("Invalid action", denial=Denial.INVALID_ACTION)

    task.note_ids = [nid for nid in (task.note_ids or []) if nid != note.id]
    db.session.delete(note)
    db.session.flush()
