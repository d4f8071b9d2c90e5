"""
Extension singletons for the ERP API.

Created unbound here and attached to the app in create_app(), so models,
the store and the blueprints can import them without importing the app.

- db: Flask-SQLAlchemy; one session per app context / request
- migrate: Alembic migrations via `flask db ...`
- login_manager: cookie session holding the user id (no login view; the
  API answers 401 itself through erp.security.gated)
"""

from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
