"""User lookups used by the project core, plus the admin create-user path."""

import logging

from email_validator import EmailNotValidError, validate_email

from uptask.core.exceptions import NotFoundError, ValidationError
from uptask.models import db
from uptask.models.auth import User
from uptask.utils.crypto import hash_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Validate syntax and return the lower-cased address.

    Raises:
        ValidationError: the address is not a valid email.
    """
    try:
        valid = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(
            "Invalid email",
            errors=[{"field": "email", "msg": f"Invalid email: {e}"}],
        ) from e
    return valid.normalized.lower()


def find_member_by_email(email: str) -> User:
    """Resolve an email to a user (exact match after normalization).

    Raises:
        ValidationError: malformed address.
        NotFoundError: no such user.
    """
    normalized = normalize_email(email)
    user = User.query.filter_by(email=normalized).first()
    if not user:
        raise NotFoundError(resource="User")
    return user


def create_user(email: str, name: str, password: str, *, confirmed: bool = True) -> User:
    """Create a user with a bcrypt password hash. Used by the CLI and tests.

    Raises:
        ValidationError: bad email, empty name, or email already taken.
    """
    normalized = normalize_email(email)
    if not (name or "").strip():
        raise ValidationError("Invalid input", errors=[{"field": "name", "msg": "Name is required"}])
    if User.query.filter_by(email=normalized).first():
        raise ValidationError(
            "Invalid input",
            errors=[{"field": "email", "msg": "A user with that email already exists"}],
        )

    user = User(
        email=normalized,
        name=name.strip(),
        password_hash=hash_password(password),
        confirmed=confirmed,
    )
    db.session.add(user)
    db.session.flush()
    logger.info("User %s created", user.id)
    return user
