"""
Project Access Middleware: authenticates the caller and resolves path ids.

Registered as blueprint ``before_request`` hooks by
``uptask.blueprints.init_api_blueprint``. Before any view runs:

  1. ``authenticate_request`` loads the JWT user into a fresh
     ``RequestContext`` (401 if there is none).
  2. ``resolve_path_entities`` loads ``project_id``, ``task_id`` and
     ``note_id`` route parameters, in that order, into the same context.
     A missing entity stops the request with 404. Once the project is
     loaded, a caller outside its team stops there with the same 404, so
     nested ids reveal nothing about projects they cannot read. A task that
     exists but belongs to a different project stops it with 400 "Invalid
     action".

CORS preflight (OPTIONS) passes both hooks untouched; flask-cors answers it.

Views then read everything from ``current_context()``:

    @bp.route("/<int:project_id>/tasks", methods=["GET"])
    def list_tasks(project_id):
        ctx = current_context()
        require_member(ctx.user.id, ctx.project)
        ...
"""

import logging
from dataclasses import dataclass

from flask import g, request
from sqlalchemy.exc import SQLAlchemyError

from uptask.core.exceptions import AuthenticationError, InvalidActionError, NotFoundError
from uptask.models import db
from uptask.models.auth import User
from uptask.models.note import Note
from uptask.models.project import Project
from uptask.models.task import Task
from uptask.services.authorization import require_member

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """Entities resolved for the current request."""

    user: User
    project: Project | None = None
    task: Task | None = None
    note: Note | None = None


def current_context() -> RequestContext:
    ctx = g.get("request_context")
    if ctx is None:
        raise AuthenticationError()
    return ctx


def _load(model, pk, label):
    try:
        obj = db.session.get(model, pk)
    except SQLAlchemyError:
        logger.exception("Failed to load %s id=%s", label, pk)
        raise
    if obj is None:
        raise NotFoundError(resource=label, resource_id=pk)
    return obj


def authenticate_request():
    """Require a JWT identity that maps to an existing user."""
    if request.method == "OPTIONS":
        return

    user_id = g.get("current_user_id")
    if user_id is None:
        raise AuthenticationError()

    user = db.session.get(User, user_id)
    if user is None:
        logger.warning("Token for unknown user %s rejected", user_id)
        raise AuthenticationError()

    g.request_context = RequestContext(user=user)


def resolve_path_entities():
    """Load project → task → note from the route parameters present."""
    if request.method == "OPTIONS":
        return

    view_args = request.view_args or {}
    ctx = current_context()

    if "project_id" in view_args:
        ctx.project = _load(Project, view_args["project_id"], "Project")
        require_member(ctx.user.id, ctx.project)

    if "task_id" in view_args:
        task = _load(Task, view_args["task_id"], "Task")
        if ctx.project is None or task.project_id != ctx.project.id:
            logger.warning(
                "Task %s addressed under project %s but belongs to %s",
                task.id, view_args.get("project_id"), task.project_id,
            )
            raise InvalidActionError()
        ctx.task = task

    if "note_id" in view_args:
        note = _load(Note, view_args["note_id"], "Note")
        if ctx.task is None or note.task_id != ctx.task.id:
            raise NotFoundError(resource="Note", resource_id=note.id)
        ctx.note = note
