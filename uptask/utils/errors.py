"""JSON error envelope shared by every endpoint.

    {"error": "Task not found", "code": "ERR_NOT_FOUND"}
    {"error": "Invalid input", "code": "ERR_VALIDATION_INVALID",
     "errors": [{"field": "name", "msg": "Task name is required"}]}

``error`` is for people, ``code`` is for clients that branch on it.
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Error codes. The HTTP status each one implies lives in ``STATUS_FOR``."""

    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    INVALID_ACTION = "ERR_INVALID_ACTION"
    UNAUTHENTICATED = "ERR_UNAUTHENTICATED"
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"
    HTTP = "ERR_HTTP"  # werkzeug errors (405, 415, ...); caller passes the status
    DATABASE = "ERR_DATABASE"
    INTERNAL = "ERR_INTERNAL"


STATUS_FOR: dict[str, int] = {
    E.VALIDATION_INVALID: 400,
    E.INVALID_ACTION: 400,
    E.UNAUTHENTICATED: 401,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.DATABASE: 500,
    E.INTERNAL: 500,
}


def api_error(
    code: str,
    message: str,
    *,
    status: int | None = None,
    errors: list[dict] | None = None,
):
    """Build ``(response, status)`` for an error, ready to return from a view.

    Args:
        code: One of the ``E`` constants.
        message: Human-readable text, sent as ``error``.
        status: Overrides the status implied by ``code`` (400 if unmapped).
        errors: Field-level messages, sent as ``errors`` when non-empty.
    """
    body: dict = {"error": message, "code": code}
    if errors:
        body["errors"] = errors
    return jsonify(body), status or STATUS_FOR.get(code, 400)
