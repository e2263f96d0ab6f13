# nameplate_dashboard/models/notification.py
from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from nameplate_dashboard.db.base import Base
from nameplate_dashboard.db.enums import NotificationType
from datetime import datetime, timezone
from typing import Optional


class Notification(Base):
    """
    Append-only dashboard message.
    """

    __tablename__ = "notifications"

    id :Mapped[str] = mapped_column(String(36), primary_key=True)
    message :Mapped[str] = mapped_column(String(1000), nullable=False)
    type :Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, name="notification_type"),
        nullable=False,
        default=NotificationType.info,
    )
    user_id :Mapped[Optional[str]] = mapped_column(String(36), nullable=True, comment="User the message concerns")
    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
