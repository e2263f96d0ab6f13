# nameplate_dashboard/models/unverified_nameplate.py
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    Integer,
    Index,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, validates
from nameplate_dashboard.db.base import Base
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UnverifiedNameplate(Base):
    """
    A nameplate submitted from the editor, waiting for review.
    """

    __tablename__ = "unverified_nameplates"
    __table_args__ = (
        Index("ix_unverified_hierarchy", "rmo", "officer", "lot"),
    )

    HIERARCHY_FIELDS = ("rmo", "officer", "lot")

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Nameplate UUID")

    # =========
    # 🎨 Design
    # =========
    theme :Mapped[str] = mapped_column(String(50), nullable=False)
    background :Mapped[str] = mapped_column(String(500), nullable=False, comment="Background template reference")

    house_name :Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name :Mapped[str] = mapped_column(String(255), nullable=False)
    spouse_name :Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address :Mapped[str] = mapped_column(String(500), nullable=False)

    text_color :Mapped[str] = mapped_column(String(30), nullable=False, default="#000000")
    house_name_color :Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    house_name_size :Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    owner_name_color :Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    owner_name_size :Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    address_color :Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address_size :Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # =========
    # 🔒 Hierarchy keys (immutable after creation)
    # =========
    rmo :Mapped[str] = mapped_column(String(20), nullable=False)
    officer :Mapped[str] = mapped_column(String(30), nullable=False)
    lot :Mapped[str] = mapped_column(String(100), nullable=False)

    # =========
    # 📇 Contact
    # =========
    officer_name :Mapped[str] = mapped_column(String(100), nullable=False)
    email :Mapped[str] = mapped_column(String(255), nullable=False)
    mobile_number :Mapped[str] = mapped_column(String(20), nullable=False, default="")
    designation :Mapped[str] = mapped_column(String(100), nullable=False, default="")

    image_url :Mapped[str] = mapped_column(String(1000), nullable=False, default="")

    # =========
    # 🔁 Review state
    # =========
    verified :Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    verified_at :Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    verified_by :Mapped[Optional[str]] = mapped_column(String(36), nullable=True, comment="User ID of the reviewer")

    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=func.now(),
        nullable=False,
    )

    @validates(*HIERARCHY_FIELDS)
    def _freeze_hierarchy(self, key, value):
        current = getattr(self, key)
        if current is not None and current != value:
            raise ValueError(f"{key} of a nameplate cannot be changed once set")
        return value

    def __repr__(self) -> str:
        return f"<UnverifiedNameplate id={self.id} lot={self.lot} verified={self.verified}>"
