# nameplate_dashboard/models/user.py
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    Enum,
    Integer,
    func,
)
from nameplate_dashboard.db.base import Base
from nameplate_dashboard.db.enums import UserRole
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional


class User(Base):
    """
    Dashboard account: admin, RMO or field officer.
    """

    __tablename__ = "users"

    # =========
    # 🔒 Identity
    # =========
    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="User UUID")

    officer_name :Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name of the account holder",
    )

    email :Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Login email, stored lower-cased",
    )

    password_hash :Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )

    mobile_number :Mapped[str] = mapped_column(String(20), nullable=False, comment="Mobile number, 10-15 digits")

    role :Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.officer,
        index=True,
        comment="admin / rmo / officer",
    )

    # =========
    # 🏢 Hierarchy (denormalized)
    # =========
    rmo :Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True, comment="RMO code, e.g. RMO1")

    officer_number :Mapped[Optional[str]] = mapped_column(
        String(30),
        unique=True,
        nullable=True,
        comment="Generated officer code, e.g. OFF11",
    )

    # =========
    # ✍️ Profile
    # =========
    designation :Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    area :Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery_office :Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address :Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image :Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # =========
    # 🔁 System maintained
    # =========
    is_active :Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment="Whether the account may log in")
    last_login :Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    login_count :Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Account creation timestamp",
    )
    updated_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value}>"
