"""
Health check blueprint.

    GET /api/health: 200 when the app and its database answer, 503 otherwise
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from uptask.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("", methods=["GET"])
def health():
    try:
        db.session.execute(db.text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check failed, database unreachable: %s", exc)
        return jsonify({"status": "degraded", "database": "error"}), 503
    return jsonify({"status": "ok"})
