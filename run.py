# run.py
"""
Development server entry point.

Production deployments should serve ``create_app('production')`` from a WSGI
server instead.
"""
import os

from nameplate_dashboard.app_factory import create_app, default_database_url
from nameplate_dashboard.db.auto_init import auto_init
from nameplate_dashboard.logger import get_logger

logger = get_logger("run")


def configure_database():
    """Default DATABASE_URL to a SQLite file in the project root."""
    if not os.getenv("DATABASE_URL"):
        os.environ["DATABASE_URL"] = default_database_url()
    logger.info(f"Using database: {os.environ['DATABASE_URL']}")


def main():
    # 1. database location
    configure_database()

    # 2. tables + admin account
    auto_init()

    # 3. app
    app = create_app(os.getenv("FLASK_CONFIG", "development"))

    # 4. server
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5000))
    app.run(host=host, port=port, debug=os.getenv("FLASK_DEBUG") == "1", use_reloader=False)


if __name__ == "__main__":
    main()
