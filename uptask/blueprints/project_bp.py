"""
UpTask API
Project blueprint: projects, tasks and task status endpoints.

Endpoints summary:
    PROJECT  /api/projects                                   GET, POST
             /api/projects/<project_id>                      GET, PUT, DELETE

    TASK     /api/projects/<project_id>/tasks                GET, POST
             /api/projects/<project_id>/tasks/<task_id>      GET, PUT, DELETE
             /api/projects/<project_id>/tasks/<task_id>/status   POST

Every endpoint requires a JWT identity. project_id / task_id are resolved
before the view runs (see ``uptask.middleware.project_access``); views then
authorize, validate the body, call the service and commit once.
"""

import logging

from flask import Blueprint, jsonify

from uptask.blueprints import init_api_blueprint
from uptask.core.exceptions import Denial
from uptask.middleware.project_access import current_context
from uptask.services import project_service, task_service
from uptask.services.authorization import require_manager, require_member
from uptask.utils.helpers import db_commit_or_error, json_body
from uptask.utils.validation import require_fields

logger = logging.getLogger(__name__)

project_bp = Blueprint("projects", __name__, url_prefix="/api/projects")
init_api_blueprint(project_bp)

PROJECT_FIELDS = {
    "projectName": "Project name is required",
    "clientName": "Client name is required",
    "description": "Description is required",
}

TASK_FIELDS = {
    "name": "Task name is required",
    "description": "Description is required",
}


# ═══════════════════════════════════════════════════════════════════════════
#  PROJECTS
# ═══════════════════════════════════════════════════════════════════════════

@project_bp.route("", methods=["POST"])
def create_project():
    ctx = current_context()
    data = json_body()
    require_fields(data, PROJECT_FIELDS)

    project_service.create_project(manager_id=ctx.user.id, data=data)
    err = db_commit_or_error()
    if err:
        return err
    return "Project created", 201


@project_bp.route("", methods=["GET"])
def list_projects():
    ctx = current_context()
    projects = project_service.list_projects_for_user(ctx.user.id)
    return jsonify([p.to_dict() for p in projects])


@project_bp.route("/<int:project_id>", methods=["GET"])
def get_project(project_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    return jsonify(project_service.serialize_project(ctx.project))


@project_bp.route("/<int:project_id>", methods=["PUT"])
def update_project(project_id):
    ctx = current_context()
    require_manager(
        ctx.user.id, ctx.project,
        message="Project not found",
        denial=Denial.NOT_FOUND_LIKE,
    )
    data = json_body()
    require_fields(data, PROJECT_FIELDS)

    project_service.update_project(ctx.project, data)
    err = db_commit_or_error()
    if err:
        return err
    return "Project updated"


@project_bp.route("/<int:project_id>", methods=["DELETE"])
def delete_project(project_id):
    ctx = current_context()
    require_manager(
        ctx.user.id, ctx.project,
        message="Project not found",
        denial=Denial.NOT_FOUND_LIKE,
    )

    project_service.delete_project(ctx.project)
    err = db_commit_or_error()
    if err:
        return err
    return "Project deleted"


# ═══════════════════════════════════════════════════════════════════════════
#  TASKS
# ═══════════════════════════════════════════════════════════════════════════

@project_bp.route("/<int:project_id>/tasks", methods=["POST"])
def create_task(project_id):
    ctx = current_context()
    require_manager(ctx.user.id, ctx.project)
    data = json_body()
    require_fields(data, TASK_FIELDS)

    task_service.create_task(ctx.project, data)
    err = db_commit_or_error()
    if err:
        return err
    return "Task created", 201


@project_bp.route("/<int:project_id>/tasks", methods=["GET"])
def list_tasks(project_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    tasks = task_service.list_project_tasks(ctx.project)
    return jsonify([t.to_dict(include_project=True) for t in tasks])


@project_bp.route("/<int:project_id>/tasks/<int:task_id>", methods=["GET"])
def get_task(project_id, task_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    return jsonify(task_service.serialize_task(ctx.task))


@project_bp.route("/<int:project_id>/tasks/<int:task_id>", methods=["PUT"])
def update_task(project_id, task_id):
    ctx = current_context()
    require_manager(ctx.user.id, ctx.project)
    data = json_body()
    require_fields(data, TASK_FIELDS)

    task_service.update_task(ctx.task, data)
    err = db_commit_or_error()
    if err:
        return err
    return "Task updated"


@project_bp.route("/<int:project_id>/tasks/<int:task_id>", methods=["DELETE"])
def delete_task(project_id, task_id):
    ctx = current_context()
    require_manager(ctx.user.id, ctx.project)

    task_service.delete_task(ctx.project, ctx.task)
    err = db_commit_or_error()
    if err:
        return err
    return "Task deleted"


@project_bp.route("/<int:project_id>/tasks/<int:task_id>/status", methods=["POST"])
def update_task_status(project_id, task_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    data = json_body()
    require_fields(data, {"status": "Status is required"})

    task_service.update_status(ctx.task, data["status"], ctx.user.id)
    err = db_commit_or_error()
    if err:
        return err
    return "Task status updated"
