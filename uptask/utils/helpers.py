"""Request helpers shared by the blueprints."""

import logging

from flask import request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from uptask.models import db
from uptask.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """The request's JSON object, or ``{}`` for a missing, malformed or non-object body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def db_commit_or_error():
    """Commit everything the request flushed, as one unit.

    Returns None when the commit succeeds. Otherwise the session is rolled
    back and an error response is returned for the view to pass on:

        err = db_commit_or_error()
        if err:
            return err

    IntegrityError gives 409 and any other database failure gives 500.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Commit rejected by a constraint on %s: %s", request.path, exc.orig)
        return api_error(E.CONFLICT_DUPLICATE, "Duplicate or constraint violation")
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Commit failed on %s %s", request.method, request.path)
        return api_error(E.DATABASE, "Internal server error")
    return None
