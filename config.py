"""
Application configuration.
This module defines the configuration settings for the Flask application, including database connection, secret key,
session cookie flags and logging level. It uses environment variables for sensitive information and defaults for
development. In production, make sure to set the appropriate environment variables and secure the secret key.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'erp.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie (Flask-Login stores the user id in it)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    APP_NAME = "Project ERP"


class TestingConfig(Config):
    """In-memory database, fixed secret."""

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
