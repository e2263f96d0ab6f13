# nameplate_dashboard/models/verified_nameplate.py
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from nameplate_dashboard.db.base import Base
from datetime import datetime, timezone
from typing import Optional


class VerifiedNameplate(Base):
    """
    Print-ready copy of a nameplate. Written once by "send to print".
    """

    __tablename__ = "verified_nameplates"

    id :Mapped[str] = mapped_column(String(36), primary_key=True)

    source_nameplate_id :Mapped[Optional[str]] = mapped_column(
        String(36),
        unique=True,
        nullable=True,
        comment="UnverifiedNameplate this row was copied from; unique so a record prints once",
    )

    rmo :Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    officer_id :Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    lot :Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    house_name :Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name :Mapped[str] = mapped_column(String(255), nullable=False)
    spouse_name :Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address :Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    image_url :Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    printed_by :Mapped[Optional[str]] = mapped_column(String(36), nullable=True, comment="User ID that sent the batch")
    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<VerifiedNameplate id={self.id} rmo={self.rmo} lot={self.lot}>"
