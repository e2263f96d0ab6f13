# create_admin.py
"""
Seed an admin plus a demo RMO and officer.
Development only.
"""
import os

from nameplate_dashboard.app_factory import default_database_url
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.init_db import init_db
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.services.user_service import UserService

logger = get_logger("create_admin")

USERS_TO_CREATE = [
    {
        "officer_name": "Administrator",
        "email": "admin@example.com",
        "password": "admin123",
        "mobile_number": "9000000000",
        "role": UserRole.admin,
    },
    {
        "officer_name": "RMO One",
        "email": "rmo1@example.com",
        "password": "rmo1123",
        "mobile_number": "9000000001",
        "role": UserRole.rmo,
        "rmo": "RMO1",
    },
    {
        "officer_name": "Officer One",
        "email": "officer1@example.com",
        "password": "officer1123",
        "mobile_number": "9000000002",
        "role": UserRole.officer,
        "rmo": "RMO1",
        "designation": "Sales Officer",
    },
]


def create_admin():
    os.environ.setdefault("DATABASE_URL", default_database_url())
    init_db()
    db = get_session()
    try:
        user_service = UserService(db)

        for u in USERS_TO_CREATE:
            if user_service.get_user_by_email(u["email"]):
                logger.info(f"user '{u['email']}' already exists, skipping")
                continue
            user = user_service.register_user(**u)
            logger.info(f"created {user.role.value} {user.email} {user.officer_number or ''}")

        db.commit()

    except Exception:
        db.rollback()
        logger.exception("seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
