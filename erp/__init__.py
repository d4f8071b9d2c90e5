"""
erp/__init__.py

Flask application factory for the Project ERP JSON API.

Requirements:
- Clear architecture, stable imports.
- PostgreSQL-ready (SQLAlchemy + migrations) but SQLite is used for dev.
- The client is never trusted; access control is enforced server-side by
  erp.security (one policy table, one gate).
- Every failure is JSON: {"message": ..., "errors": {...}} with its HTTP status.
"""

from __future__ import annotations

import logging

import click
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .errors import ErpError
from .extensions import db, login_manager, migrate
from .models import User
from .utils import IdConverter

# Blueprint imports kept inside create_app() where possible to reduce import side effects.

logger = logging.getLogger(__name__)


def _configure_logging(app: Flask) -> None:
    level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("erp").setLevel(level)
    app.logger.setLevel(level)


def create_app(config_object: str | object = "config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.url_map.converters["id"] = IdConverter

    _configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str) -> User | None:
        """Load user for Flask-Login."""
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    # ----------------------------------------------------------------------
    # Errors (JSON only)
    # ----------------------------------------------------------------------
    @app.errorhandler(ErpError)
    def _handle_erp_error(exc: ErpError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.auth import auth_bp
    from .blueprints.projects import projects_bp
    from .blueprints.attendance import attendance_bp
    from .blueprints.budget import budget_bp
    from .blueprints.milestones import milestones_bp
    from .blueprints.reports import reports_bp
    from .blueprints.users import users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(budget_bp)
    app.register_blueprint(milestones_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(users_bp)

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables (dev shortcut for `flask db upgrade`)."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed-admin")
    @click.option("--username", required=True)
    @click.option("--password", required=True)
    @click.option("--name", default="System Administrator", show_default=True)
    def seed_admin_command(username: str, password: str, name: str):
        """Create the first admin account (idempotent)."""
        from .seed import seed_admin

        user, created = seed_admin(username, password, name)
        if created:
            click.echo(f"Admin {user.username} created.")
        else:
            click.echo(f"User {user.username} already exists ({user.role}).")

    logger.debug("%s created with %s", app.config.get("APP_NAME", "app"), config_object)
    return app
