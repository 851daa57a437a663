"""JWT verification, request context resolution and user management."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from uptask.core.exceptions import NotFoundError, ValidationError
from uptask.models import db as _db
from uptask.models.auth import User
from uptask.services import user_service
from uptask.services.jwt_service import decode_access_token, generate_access_token
from uptask.utils.crypto import verify_password


def _secret(app):
    return app.config.get("JWT_SECRET_KEY") or app.config["SECRET_KEY"]


def _token(app, **overrides):
    now = datetime.now(timezone.utc)
    payload = {"sub": "1", "type": "access", "iat": now, "exp": now + timedelta(minutes=5)}
    payload.update(overrides)
    return jwt.encode(payload, _secret(app), algorithm="HS256")


# ── Tokens ───────────────────────────────────────────────────────────────


def test_token_round_trip(manager):
    assert decode_access_token(generate_access_token(manager.id)) == manager.id


def test_refresh_token_type_rejected(app):
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(_token(app, type="refresh"))


def test_non_numeric_subject_rejected(app):
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(_token(app, sub="abc"))


def test_expired_token_gets_401(app, client, manager):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = _token(app, sub=str(manager.id), iat=past, exp=past + timedelta(minutes=1))

    res = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_signed_with_other_key_gets_401(client, manager):
    token = jwt.encode({"sub": str(manager.id), "type": "access"}, "x" * 40, algorithm="HS256")
    res = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_for_unknown_user_gets_401(client):
    res = client.get(
        "/api/projects", headers={"Authorization": f"Bearer {generate_access_token(5555)}"},
    )
    assert res.status_code == 401


def test_non_bearer_header_gets_401(client, manager):
    res = client.get("/api/projects", headers={"Authorization": f"Token {generate_access_token(manager.id)}"})
    assert res.status_code == 401


def test_authentication_precedes_resolution(client):
    res = client.get("/api/projects/999999/tasks/1")
    assert res.status_code == 401


def test_health_needs_no_token(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


# ── Request plumbing ─────────────────────────────────────────────────────


def test_request_id_is_echoed(client):
    res = client.get("/api/health", headers={"X-Request-ID": "abc123"})
    assert res.headers["X-Request-ID"] == "abc123"
    assert "X-Request-Duration-Ms" in res.headers


def test_unknown_origin_is_rejected(app, client, manager, auth_headers):
    headers = {**auth_headers(manager), "Origin": "https://evil.example.com"}
    res = client.get("/api/projects", headers=headers)
    assert res.status_code == 403
    assert res.get_json()["error"] == "CORS error"


def test_frontend_origin_is_allowed(app, client, manager, auth_headers):
    origin = app.config["FRONTEND_URL"].split(",")[0].strip()
    res = client.get("/api/projects", headers={**auth_headers(manager), "Origin": origin})
    assert res.status_code == 200
    assert res.headers["Access-Control-Allow-Origin"] == origin


def test_frontend_preflight_passes_without_credentials(app, client, project):
    origin = app.config["FRONTEND_URL"].split(",")[0].strip()
    res = client.options(
        f"/api/projects/{project.id}",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "PUT",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )

    assert res.status_code == 200
    assert res.headers["Access-Control-Allow-Origin"] == origin
    assert "PUT" in res.headers["Access-Control-Allow-Methods"]


# ── Users ────────────────────────────────────────────────────────────────


def test_create_user_hashes_password():
    user = user_service.create_user("Dev@Example.com", " Dev ", "s3cret-pass")
    _db.session.commit()

    assert user.email == "dev@example.com"
    assert user.name == "Dev"
    assert user.confirmed is True
    assert user.password_hash != "s3cret-pass"
    assert verify_password("s3cret-pass", user.password_hash)
    assert not verify_password("wrong", user.password_hash)


def test_create_user_rejects_duplicate_email(manager):
    with pytest.raises(ValidationError) as exc:
        user_service.create_user("MANAGER@example.com", "Again", "pw")
    assert exc.value.errors[0]["field"] == "email"


def test_create_user_requires_name():
    with pytest.raises(ValidationError) as exc:
        user_service.create_user("a@example.com", "  ", "pw")
    assert exc.value.errors[0]["field"] == "name"


def test_find_member_by_email_miss():
    with pytest.raises(NotFoundError):
        user_service.find_member_by_email("ghost@example.com")


def test_verify_password_without_hash():
    assert verify_password("anything", "") is False


def test_create_user_cli(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["create-user", "cli@example.com", "Cli", "pw-123456"])

    assert result.exit_code == 0, result.output
    user = User.query.filter_by(email="cli@example.com").one()
    assert f"Created user {user.id}" in result.output

    again = runner.invoke(args=["create-user", "cli@example.com", "Cli", "pw-123456"])
    assert again.exit_code != 0
    assert "already exists" in again.output
