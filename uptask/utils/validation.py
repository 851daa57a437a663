"""Request-body validation.

Each checker collects every failing field before raising, so the client
gets the full list in one response:

    {"error": "Invalid input", "errors": [{"field": "name", "msg": "..."}]}
"""

from uptask.core.exceptions import ValidationError


def require_fields(data: dict, messages: dict[str, str]) -> None:
    """Require each key of ``messages`` to be a non-blank string in ``data``.

    Args:
        data: Parsed JSON body.
        messages: field name -> message reported when the field is missing.

    Raises:
        ValidationError: one entry per missing or blank field.
    """
    errors = []
    for field, msg in messages.items():
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append({"field": field, "msg": msg})
    if errors:
        raise ValidationError("Invalid input", errors=errors)


def require_id(data: dict, field: str, msg: str = "Invalid ID") -> int:
    """Return ``data[field]`` as a positive int id.

    Accepts ints and digit strings; booleans are rejected.

    Raises:
        ValidationError: missing or not an id.
    """
    value = data.get(field)
    if isinstance(value, bool):
        value = None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < 1:
        raise ValidationError("Invalid input", errors=[{"field": field, "msg": msg}])
    return value
