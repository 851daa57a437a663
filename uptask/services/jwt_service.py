"""
Access tokens (HS256, PyJWT).

The login service that fronts this API issues tokens; UpTask verifies them.
``generate_access_token`` exists for that service's shared use and for tests.

Claims:
    sub   user id as a string (RFC 7519 requires a string subject)
    type  always "access"; refresh or other tokens are rejected
    iat, exp, jti
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def _signing_key() -> str:
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def generate_access_token(user_id: int) -> str:
    issued = datetime.now(timezone.utc)
    lifetime = timedelta(seconds=current_app.config.get("JWT_ACCESS_EXPIRES", 900))
    claims = {
        "sub": str(user_id),
        "type": TOKEN_TYPE,
        "iat": issued,
        "exp": issued + lifetime,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, _signing_key(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """Verify ``token`` and return its user id.

    Raises:
        jwt.InvalidTokenError: bad signature, expired (``ExpiredSignatureError``),
            wrong ``type``, or a subject that is not an integer id.
    """
    claims = jwt.decode(token, _signing_key(), algorithms=[ALGORITHM])

    if claims.get("type") != TOKEN_TYPE:
        raise jwt.InvalidTokenError(f"not an access token: {claims.get('type')!r}")

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("subject is not a user id") from exc
