"""
UpTask API
Note blueprint: comments on tasks.

    POST   /api/projects/<project_id>/tasks/<task_id>/notes
    GET    /api/projects/<project_id>/tasks/<task_id>/notes
    DELETE /api/projects/<project_id>/tasks/<task_id>/notes/<note_id>
"""

from flask import Blueprint, jsonify

from uptask.blueprints import init_api_blueprint
from uptask.middleware.project_access import current_context
from uptask.services import note_service
from uptask.services.authorization import require_member
from uptask.utils.helpers import db_commit_or_error, json_body
from uptask.utils.validation import require_fields

note_bp = Blueprint("notes", __name__, url_prefix="/api/projects")
init_api_blueprint(note_bp)


@note_bp.route("/<int:project_id>/tasks/<int:task_id>/notes", methods=["POST"])
def create_note(project_id, task_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    data = json_body()
    require_fields(data, {"content": "Content is required"})

    note_service.create_note(ctx.task, ctx.user.id, data["content"])
    err = db_commit_or_error()
    if err:
        return err
    return "Note created", 201


@note_bp.route("/<int:project_id>/tasks/<int:task_id>/notes", methods=["GET"])
def list_notes(project_id, task_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    return jsonify([n.to_dict() for n in note_service.list_task_notes(ctx.task)])


@note_bp.route("/<int:project_id>/tasks/<int:task_id>/notes/<int:note_id>", methods=["DELETE"])
def delete_note(project_id, task_id, note_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)

    note_service.delete_note(ctx.task, ctx.note, ctx.user.id)
    err = db_commit_or_error()
    if err:
        return err
    return "Note deleted"
