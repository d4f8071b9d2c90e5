from .routes import attendance_bp  # noqa: F401
