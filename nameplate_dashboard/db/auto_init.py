"""
Startup database check: create missing tables and make sure an admin account
exists.
"""
import os

from sqlalchemy import inspect

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.init_db import init_db
from nameplate_dashboard.db.session import get_engine, get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.services.user_service import UserService

logger = get_logger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "admin123"


def check_tables_exist() -> bool:
    try:
        inspector = inspect(get_engine())
        tables = inspector.get_table_names()
        return "users" in tables and "unverified_nameplates" in tables
    except Exception as e:
        logger.warning(f"table check failed: {e}")
        return False


def admin_email() -> str:
    return os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL).strip().lower()


def check_admin_user_exists() -> bool:
    db = get_session()
    try:
        return UserService(db).get_user_by_email(admin_email()) is not None
    finally:
        db.close()


def create_admin_user():
    db = get_session()
    try:
        user_service = UserService(db)
        if user_service.get_user_by_email(admin_email()):
            logger.info("admin account already exists, skipping")
            return

        user_service.register_user(
            officer_name="Administrator",
            email=admin_email(),
            password=os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            mobile_number="0000000000",
            role=UserRole.admin,
        )
        db.commit()
        logger.info(f"admin account created: {admin_email()} (change the password after first login)")

    except Exception:
        db.rollback()
        logger.exception("admin account creation failed")
        raise
    finally:
        db.close()


def auto_init():
    """Create tables and the admin account when missing."""
    if not check_tables_exist():
        logger.info("tables missing, creating")
        init_db()
    if not check_admin_user_exists():
        create_admin_user()
    logger.info("database initialisation check done")


if __name__ == "__main__":
    auto_init()
