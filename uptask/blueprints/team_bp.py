"""
UpTask API
Team blueprint: project membership.

    POST   /api/projects/<project_id>/team/find        look up a user by email
    GET    /api/projects/<project_id>/team             list members
    POST   /api/projects/<project_id>/team             add member {"id": ...}
    DELETE /api/projects/<project_id>/team/<user_id>   remove member

Lookups are open to anyone with access to the project; changing the team
is reserved to its manager.
"""

from flask import Blueprint, jsonify

from uptask.blueprints import init_api_blueprint
from uptask.middleware.project_access import current_context
from uptask.services import team_service, user_service
from uptask.services.authorization import require_manager, require_member
from uptask.utils.helpers import db_commit_or_error, json_body
from uptask.utils.validation import require_fields, require_id

team_bp = Blueprint("team", __name__, url_prefix="/api/projects")
init_api_blueprint(team_bp)


@team_bp.route("/<int:project_id>/team/find", methods=["POST"])
def find_member_by_email(project_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    data = json_body()
    require_fields(data, {"email": "Email is required"})

    user = user_service.find_member_by_email(data["email"])
    return jsonify(user.to_summary())


@team_bp.route("/<int:project_id>/team", methods=["GET"])
def list_team(project_id):
    ctx = current_context()
    require_member(ctx.user.id, ctx.project)
    return jsonify([u.to_summary() for u in team_service.list_team(ctx.project)])


@team_bp.route("/<int:project_id>/team", methods=["POST"])
def add_member(project_id):
    ctx = current_context()
    require_manager(ctx.user.id, ctx.project)
    user_id = require_id(json_body(), "id")

    changed = team_service.add_member(ctx.project, user_id)
    if changed:
        err = db_commit_or_error()
        if err:
            return err
    return "User added to the team"


@team_bp.route("/<int:project_id>/team/<int:user_id>", methods=["DELETE"])
def remove_member(project_id, user_id):
    ctx = current_context()
    require_manager(ctx.user.id, ctx.project)

    team_service.remove_member(ctx.project, user_id)
    err = db_commit_or_error()
    if err:
        return err
    return "User removed from the team"
