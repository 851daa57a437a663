"""
Bearer-token parsing for /api/ requests.

Sets ``g.current_user_id`` to the token's user id, or None when the header
is missing, malformed, expired or signed with another key. Whether None is
acceptable is decided later by the blueprint hooks (401 on protected routes).
"""

import logging

import jwt as pyjwt
from flask import g, request

from uptask.services.jwt_service import decode_access_token

logger = logging.getLogger(__name__)

# Unauthenticated endpoints
PUBLIC_PREFIXES = ("/api/health",)


def _bearer_token():
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()


def init_jwt_middleware(app):
    """Register the token parser as an app-wide ``before_request`` hook."""

    @app.before_request
    def _identify_caller():
        # g outlives a request when the caller holds an app context (tests)
        g.current_user_id = None
        g.request_context = None

        if not request.path.startswith("/api/") or request.path.startswith(PUBLIC_PREFIXES):
            return

        token = _bearer_token()
        if token is None:
            return

        try:
            g.current_user_id = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            logger.debug("Expired token on %s", request.path)
        except pyjwt.InvalidTokenError as exc:
            logger.info("Rejected token on %s: %s", request.path, exc)
