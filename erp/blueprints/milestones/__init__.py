from .routes import milestones_bp  # noqa: F401
