# nameplate_dashboard/services/notification_service.py
from typing import List, Optional, Union
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.orm import Session

from nameplate_dashboard.db.enums import NotificationType
from nameplate_dashboard.models.notification import Notification


class NotificationService:
    """
    The only place Notification rows are created. Append-only: there is no
    update or delete.
    """

    def __init__(self, db: Session):
        self.db = db

    def _normalize_type(self, type_: Union[str, NotificationType, None]) -> NotificationType:
        if type_ is None or type_ == "":
            return NotificationType.info
        if isinstance(type_, NotificationType):
            return type_
        try:
            return NotificationType(str(type_).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown notification type: {type_}. Valid values: {[t.value for t in NotificationType]}"
            )

    def notify(
        self,
        *,
        message: str,
        type_: Union[str, NotificationType, None] = NotificationType.info,
        user_id: Optional[str] = None,
    ) -> Notification:
        '''
        Append a notification.

        :param message: Text shown on the dashboard
        :type message: str
        :param type_: success / error / info (string or enum)
        :type type_: Union[str, NotificationType, None]
        :param user_id: User the notification concerns, optional
        :type user_id: Optional[str]
        '''
        if not (message or "").strip():
            raise ValueError("message is required")
        notification = Notification(
            id=str(uuid4()),
            message=message.strip(),
            type=self._normalize_type(type_),
            user_id=user_id,
        )
        self.db.add(notification)
        return notification

    def list_notifications(self, *, user_id: Optional[str] = None, limit: int = 100) -> List[Notification]:
        query = self.db.query(Notification)
        if user_id:
            query = query.filter(Notification.user_id == user_id)
        return query.order_by(desc(Notification.created_at)).limit(limit).all()
