"""
UpTask API
Flask Application Factory.

Usage:
    from uptask import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from uptask.config import config
from uptask.core.exceptions import ValidationError
from uptask.middleware.jwt_auth import init_jwt_middleware
from uptask.middleware.logging_config import configure_logging
from uptask.middleware.request_log import init_request_logging
from uptask.models import db
from uptask.utils.errors import E, api_error

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to the APP_ENV env var, or "development".

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())
    # Development SQLite file lives in instance/
    os.makedirs(app.instance_path, exist_ok=True)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)

    # ── Request logging (X-Request-ID, duration) ─────────────────────────
    init_request_logging(app)

    # ── CORS: only FRONTEND_URL may call the API ─────────────────────────
    allowed_origins = [o.strip() for o in app.config["FRONTEND_URL"].split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

    @app.before_request
    def _guard_origin():
        if request.path.startswith("/api/health"):
            return None
        origin = request.headers.get("Origin")
        if origin is None:
            if app.config["CORS_ALLOW_NO_ORIGIN"]:
                return None
            logger.warning("Rejected request without Origin: %s %s", request.method, request.path)
            return api_error(E.HTTP, "CORS error", status=403)
        if origin not in allowed_origins:
            logger.warning("Rejected origin %s: %s %s", origin, request.method, request.path)
            return api_error(E.HTTP, "CORS error", status=403)
        return None

    # ── JWT auth middleware (sets g.current_user_id) ─────────────────────
    init_jwt_middleware(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from uptask.models import auth as _auth_models          # noqa: F401
    from uptask.models import project as _project_models    # noqa: F401
    from uptask.models import task as _task_models          # noqa: F401
    from uptask.models import note as _note_models          # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except Exception as e:
            app.logger.warning("db.create_all() failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    from uptask.blueprints.health_bp import health_bp
    from uptask.blueprints.note_bp import note_bp
    from uptask.blueprints.project_bp import project_bp
    from uptask.blueprints.team_bp import team_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(team_bp)
    app.register_blueprint(note_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("create-user")
    @click.argument("email")
    @click.argument("name")
    @click.argument("password")
    def create_user_cmd(email, name, password):
        """Create a confirmed user with a bcrypt-hashed password."""
        from uptask.services.user_service import create_user
        try:
            user = create_user(email, name, password)
        except ValidationError as exc:
            db.session.rollback()
            raise click.ClickException("; ".join(e["msg"] for e in exc.errors) or str(exc))
        db.session.commit()
        click.echo(f"Created user {user.id} <{user.email}>")

    # ── Error handlers for requests no blueprint claimed ─────────────────
    @app.errorhandler(404)
    def not_found(e):
        return api_error(E.NOT_FOUND, "Not found")

    @app.errorhandler(405)
    def method_not_allowed(e):
        return api_error(E.HTTP, "Method not allowed", status=405)

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")

    return app
