"""
Authentication Routes

Provides:
- POST /api/register
- POST /api/login
- POST /api/logout
- GET  /api/user

Rules:
- Passwords are stored as werkzeug hashes only.
- Register and login are the only endpoints reachable without a session.
- The session is the Flask-Login cookie; responses carry the public user shape
  (never the password hash).
"""

import logging

from flask import Blueprint, jsonify
from flask_login import login_user, logout_user

from ...errors import Unauthenticated
from ...forms import LoginForm, RegisterForm, validated
from ...security import gated
from ...store import entity_store

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


# ============================================================
# REGISTER
# ============================================================

@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Create an account and start a session for it.

    - confirmPassword must match password
    - username must be unused
    """
    form = validated(RegisterForm)

    user = entity_store().create_user(
        username=form.username.data.strip(),
        password=form.password.data,
        name=form.name.data.strip(),
        role=form.role.data,
    )

    login_user(user)
    return jsonify(user.to_dict()), 201


# ============================================================
# LOGIN
# ============================================================

@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate with username/password."""
    form = validated(LoginForm)
    username = form.username.data.strip()

    user = entity_store().get_user_by_username(username)
    if not user or not user.check_password(form.password.data):
        logger.warning("Failed login for %s", username)
        raise Unauthenticated("Invalid username or password")

    login_user(user)
    logger.info("User %s logged in", user.username)
    return jsonify(user.to_dict()), 200


# ============================================================
# LOGOUT / CURRENT USER
# ============================================================

@auth_bp.route("/logout", methods=["POST"])
@gated
def logout(principal):
    """End the current session."""
    logout_user()
    logger.info("User %s logged out", principal.id)
    return jsonify({"message": "Logged out"}), 200


@auth_bp.route("/user", methods=["GET"])
@gated
def me(principal):
    user = entity_store().get_user(principal.id)
    return jsonify(user.to_dict())
