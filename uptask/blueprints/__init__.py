"""
UpTask API
Blueprint registry and the shared wiring every API blueprint gets.
"""

import logging

from flask import request
from werkzeug.exceptions import HTTPException

from uptask.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    InvalidActionError,
    NotFoundError,
    ValidationError,
)
from uptask.middleware.project_access import authenticate_request, resolve_path_entities
from uptask.models import db
from uptask.services.authorization import classify
from uptask.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def init_api_blueprint(bp):
    """Attach authentication, path resolution and error handlers to ``bp``.

    Hook order per request: JWT parsing (app level) → authenticate →
    resolve project/task/note → view.
    """
    bp.before_request(authenticate_request)
    bp.before_request(resolve_path_entities)

    @bp.errorhandler(AuthenticationError)
    def _handle_unauthenticated(error: AuthenticationError):
        return api_error(E.UNAUTHENTICATED, str(error))

    @bp.errorhandler(NotFoundError)
    def _handle_not_found(error: NotFoundError):
        logger.info("%s id=%s not found on %s", error.resource, error.resource_id, request.path)
        return api_error(E.NOT_FOUND, str(error))

    @bp.errorhandler(ForbiddenError)
    def _handle_forbidden(error: ForbiddenError):
        status = classify(error)
        code = E.NOT_FOUND if status == 404 else E.INVALID_ACTION
        return api_error(code, str(error), status=status)

    @bp.errorhandler(InvalidActionError)
    def _handle_invalid_action(error: InvalidActionError):
        return api_error(E.INVALID_ACTION, str(error))

    @bp.errorhandler(ValidationError)
    def _handle_validation(error: ValidationError):
        return api_error(E.VALIDATION_INVALID, str(error), errors=error.errors)

    @bp.errorhandler(HTTPException)
    def _handle_http(error: HTTPException):
        return api_error(E.HTTP, error.description or error.name, status=error.code)

    @bp.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        db.session.rollback()
        logger.exception("Unexpected error in %s endpoint=%s", bp.name, request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")

    return bp
