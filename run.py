"""
Entry point for Flask.

Usage (from project root):

    flask --app run.py db upgrade
    flask --app run.py seed-admin --username admin --password secret --name "System Administrator"
    flask --app run.py --debug run

Set APP_CONFIG to load another config class (e.g. "config.TestingConfig").
"""

import os

from erp import create_app

# WSGI application object. `flask run` looks for this `app` variable to start the application.
app = create_app(os.environ.get("APP_CONFIG", "config.Config"))

if __name__ == "__main__":
    # Dev only; use `flask run` or a WSGI server instead.
    app.run(debug=True)
