"""Database failures during resolution, commit and view execution."""

from unittest import mock

from sqlalchemy.exc import IntegrityError, OperationalError

from uptask.models import db as _db
from uptask.models.project import Project

BODY = {"projectName": "Shop", "clientName": "ACME", "description": "Online store"}


def _disk_error():
    return OperationalError("SELECT", {}, Exception("disk I/O error at /var/lib/db"))


# ── Resolution ───────────────────────────────────────────────────────────


def test_failed_project_lookup_returns_internal_error(client, project, manager, auth_headers):
    real_get = _db.session.get

    def _get(model, pk, *args, **kwargs):
        if model is Project:
            raise _disk_error()
        return real_get(model, pk, *args, **kwargs)

    with mock.patch.object(_db.session, "get", side_effect=_get), \
            mock.patch.object(_db.session, "rollback", wraps=_db.session.rollback) as rollback:
        res = client.get(f"/api/projects/{project.id}", headers=auth_headers(manager))

    assert res.status_code == 500
    assert res.get_json() == {"error": "Internal server error", "code": "ERR_INTERNAL"}
    assert "disk" not in res.get_data(as_text=True)
    rollback.assert_called()


# ── Commit ───────────────────────────────────────────────────────────────


def test_failed_commit_rolls_back_and_returns_500(client, manager, auth_headers):
    with mock.patch.object(_db.session, "commit", side_effect=_disk_error()), \
            mock.patch.object(_db.session, "rollback", wraps=_db.session.rollback) as rollback:
        res = client.post("/api/projects", headers=auth_headers(manager), json=BODY)

    assert res.status_code == 500
    assert res.get_json() == {"error": "Internal server error", "code": "ERR_DATABASE"}
    assert "disk" not in res.get_data(as_text=True)
    rollback.assert_called_once()
    assert Project.query.count() == 0


def test_constraint_violation_on_commit_returns_409(client, manager, auth_headers):
    violation = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: projects.id"))

    with mock.patch.object(_db.session, "commit", side_effect=violation), \
            mock.patch.object(_db.session, "rollback", wraps=_db.session.rollback) as rollback:
        res = client.post("/api/projects", headers=auth_headers(manager), json=BODY)

    assert res.status_code == 409
    body = res.get_json()
    assert body == {"error": "Duplicate or constraint violation", "code": "ERR_CONFLICT_DUPLICATE"}
    assert "UNIQUE" not in res.get_data(as_text=True)
    rollback.assert_called_once()
    assert Project.query.count() == 0


# ── Unexpected errors ────────────────────────────────────────────────────


def test_unexpected_error_hides_details(client, project, manager, auth_headers, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("secret detail")

    monkeypatch.setattr("uptask.blueprints.project_bp.project_service.serialize_project", _boom)

    with mock.patch.object(_db.session, "rollback", wraps=_db.session.rollback) as rollback:
        res = client.get(f"/api/projects/{project.id}", headers=auth_headers(manager))

    assert res.status_code == 500
    assert res.get_json() == {"error": "Internal server error", "code": "ERR_INTERNAL"}
    assert "secret detail" not in res.get_data(as_text=True)
    rollback.assert_called()
