from .routes import reports_bp  # noqa: F401
