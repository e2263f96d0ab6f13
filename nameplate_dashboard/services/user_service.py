# nameplate_dashboard/services/user_service.py
from uuid import uuid4
from typing import List, Optional
from datetime import datetime, timezone
import bcrypt
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.errors import (
    AuthenticationError,
    ConflictError,
    NameplateValidationError,
    NotFoundError,
)
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.models.user import User
from nameplate_dashboard.validation import (
    INVALID_EMAIL,
    INVALID_MOBILE,
    is_blank,
    is_valid_email,
    is_valid_mobile,
)

logger = get_logger(__name__)

OFFICER_PREFIX = "OFF"


def build_officer_number(rmo: str, sequence: int) -> str:
    """``RMO1`` + sequence 1 -> ``OFF11``."""
    return f"{OFFICER_PREFIX}{rmo.replace('RMO', '')}{sequence}"


class UserService:
    """
    Account service.
    Provides:
    - registration (with officer number generation)
    - authentication + login counters
    - lookups by id / email / role / RMO
    - activation toggling

    Token issuing lives in ``nameplate_dashboard.auth``.
    """

    def __init__(self, db: Session):
        self.db = db

    # ======================================================
    # 🔐 Internal helpers
    # ======================================================

    def _hash_password(self, password: str) -> str:
        '''Hash a password using bcrypt'''
        return bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(),
        ).decode("utf-8")

    def _verify_password(self, password: str, password_hash: str) -> bool:
        '''verify a password against its hash'''
        return bcrypt.checkpw(
            password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )

    def _next_officer_number(self, rmo: str) -> str:
        count = (
            self.db.query(func.count(User.id))
            .filter(User.rmo == rmo)
            .scalar()
        )
        return build_officer_number(rmo, count + 1)

    # ======================================================
    # 👤 User CRUD
    # ======================================================

    def register_user(
        self,
        *,
        officer_name: str,
        email: str,
        password: str,
        mobile_number: str,
        rmo: Optional[str] = None,
        role: UserRole = UserRole.officer,
        designation: Optional[str] = None,
        area: Optional[str] = None,
        delivery_office: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """
        Register a new account.

        Officers get an officer number derived from their RMO and the number of
        accounts already registered under it (``OFF`` + RMO digits + sequence).

        :param officer_name: Display name
        :type officer_name: str
        :param email: Login email (unique, case-insensitive)
        :type email: str
        :param password: Plaintext password
        :type password: str
        :param mobile_number: 10-15 digit mobile number
        :type mobile_number: str
        :param rmo: RMO code; required for officers and RMO accounts
        :type rmo: Optional[str]
        :param role: Account role
        :type role: UserRole
        """

        # 1️⃣ input checks
        required = {
            "officerName": officer_name,
            "email": email,
            "password": password,
            "mobileNumber": mobile_number,
        }
        if role in (UserRole.officer, UserRole.rmo):
            required["rmo"] = rmo
        missing = [name for name, value in required.items() if is_blank(value)]
        errors = [f"{name} is required" for name in missing]
        if not is_blank(email) and not is_valid_email(email):
            errors.append(INVALID_EMAIL)
        if not is_blank(mobile_number) and not is_valid_mobile(mobile_number):
            errors.append(INVALID_MOBILE)
        if errors:
            raise NameplateValidationError("Invalid registration", missing=missing, errors=errors)

        normalized_email = email.strip().lower()
        rmo = rmo.strip().upper() if rmo else None

        # 2️⃣ email uniqueness
        if self.get_user_by_email(normalized_email):
            raise ConflictError("User already exists")

        # 3️⃣ officer number
        officer_number = self._next_officer_number(rmo) if role == UserRole.officer else None

        user = User(
            id=str(uuid4()),
            officer_name=officer_name.strip(),
            email=normalized_email,
            password_hash=self._hash_password(password),
            mobile_number=mobile_number.strip(),
            role=role,
            rmo=rmo,
            officer_number=officer_number,
            designation=designation,
            area=area,
            delivery_office=delivery_office,
            address=address,
            is_active=True,
            login_count=0,
        )

        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(f"Officer number {officer_number} or email already taken") from exc

        logger.info(f"registered user={user.id} role={role.value} rmo={rmo} officer_number={officer_number}")
        return user

    def authenticate(
        self,
        *,
        email: str,
        password: str,
    ) -> User:
        """
        Authenticate by email + password and bump the login counters.

        :param email: Login email
        :type email: str
        :param password: Plaintext password
        :type password: str
        """

        user = self.get_user_by_email((email or "").strip().lower())

        if not user:
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise PermissionError("Account is deactivated. Please contact administrator.")

        if not self._verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        user.login_count = (user.login_count or 0) + 1
        user.last_login = datetime.now(timezone.utc)
        logger.info(f"login user={user.id} count={user.login_count}")
        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.id == user_id)
            .first()
        )

    def get_user_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.email == email)
            .first()
        )

    def get_officer(self, rmo: str, officer_number: str) -> User:
        officer = (
            self.db.query(User)
            .filter(
                User.rmo == rmo,
                func.upper(User.officer_number) == officer_number.upper(),
            )
            .first()
        )
        if not officer:
            raise NotFoundError(f"Officer {officer_number} not found in {rmo}")
        return officer

    def get_by_officer_number(self, officer_number: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.upper(User.officer_number) == officer_number.upper())
            .first()
        )

    def list_by_role(self, role: UserRole) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == role)
            .order_by(User.created_at)
            .all()
        )

    def count_by_role(self, role: UserRole) -> int:
        return (
            self.db.query(func.count(User.id))
            .filter(User.role == role)
            .scalar()
        )

    def list_rmos(self) -> List[str]:
        """Distinct, non-empty RMO codes."""
        rows = (
            self.db.query(User.rmo)
            .filter(User.rmo.isnot(None), User.rmo != "")
            .distinct()
            .order_by(User.rmo)
            .all()
        )
        return [row[0] for row in rows]

    def list_officers(self, rmo: str) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.rmo == rmo, User.role == UserRole.officer)
            .order_by(User.officer_number)
            .all()
        )

    # ======================================================
    # 🔁 Account maintenance
    # ======================================================

    def toggle_active(self, *, user_id: str) -> User:
        """
        Enable / disable an account (soft delete).

        :param user_id: ID of the user
        :type user_id: str
        """

        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        user.is_active = not user.is_active
        logger.info(f"user={user.id} is_active={user.is_active}")
        return user
