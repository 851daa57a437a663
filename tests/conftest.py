"""
Shared pytest fixtures for the UpTask API test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_user / auth_headers: user factory and bearer headers for it
    - manager, member, outsider: three users
    - project: owned by ``manager`` with ``member`` on the team
    - task: one task inside ``project``
"""

import pytest

from uptask import create_app
from uptask.models import db as _db
from uptask.models.auth import User
from uptask.services import project_service, task_service, team_service
from uptask.services.jwt_service import generate_access_token


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Users & auth ─────────────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    """Factory: ``make_user("Ana")`` -> committed, confirmed User.

    The password hash is a placeholder; bcrypt is exercised separately.
    """
    def _make(name, email=None):
        user = User(
            name=name,
            email=email or f"{name.lower()}@example.com",
            password_hash="not-a-bcrypt-hash",
            confirmed=True,
        )
        _db.session.add(user)
        _db.session.commit()
        return user
    return _make


@pytest.fixture()
def auth_headers():
    """Factory: ``auth_headers(user)`` -> Authorization header dict."""
    def _headers(user):
        return {"Authorization": f"Bearer {generate_access_token(user.id)}"}
    return _headers


@pytest.fixture()
def manager(make_user):
    return make_user("Manager")


@pytest.fixture()
def member(make_user):
    return make_user("Member")


@pytest.fixture()
def outsider(make_user):
    return make_user("Outsider")


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def project(manager, member):
    """Project managed by ``manager`` with ``member`` on its team."""
    proj = project_service.create_project(
        manager_id=manager.id,
        data={"projectName": "Website", "clientName": "ACME", "description": "Relaunch"},
    )
    team_service.add_member(proj, member.id)
    _db.session.commit()
    return proj


@pytest.fixture()
def task(project):
    t = task_service.create_task(project, {"name": "Design", "description": "Mockups"})
    _db.session.commit()
    return t
