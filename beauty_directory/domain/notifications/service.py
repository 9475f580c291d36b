"""Notification service - In-app notifications and their event triggers"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...models import NOTIFICATION_TYPES, Notification, Profile
from ...shared.exceptions import ForbiddenError, NotFoundError, ValidationError
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_LENGTH = 80


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def list_notifications(self, profile: Profile) -> list[Notification]:
        return self.repo.get_notifications(self.db, profile.id)

    def get_owned_notification(self, notification_id: int, profile: Profile) -> Notification:
        notification = self.repo.get_notification_by_id(self.db, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.profile_id != profile.id:
            raise ForbiddenError("Not allowed to modify this notification")
        return notification

    def mark_read(self, notification_id: int, profile: Profile) -> Notification:
        notification = self.get_owned_notification(notification_id, profile)
        return self.repo.mark_read(self.db, notification)

    def delete_notification(self, notification_id: int, profile: Profile) -> None:
        notification = self.get_owned_notification(notification_id, profile)
        self.repo.delete_notification(self.db, notification)

    def clear_all(self, profile: Profile) -> int:
        deleted = self.repo.clear_notifications(self.db, profile.id)
        logger.info(f"🧹 Cleared {deleted} notification(s) for profile {profile.id}")
        return deleted

    # ------------------------------------------------------------------
    # Triggers. These stage the insert in the caller's transaction.
    # ------------------------------------------------------------------

    def notify(
        self,
        profile_id: int,
        type: str,
        title: str,
        content: str,
        link: Optional[str] = None,
    ) -> Notification:
        if type not in NOTIFICATION_TYPES:
            raise ValidationError(f"Unknown notification type: {type}", field="type")
        return self.repo.add_notification(
            self.db, profile_id, type=type, title=title, content=content, link=link
        )

    def notify_message_received(self, sender: Profile, receiver_id: int, content: str) -> Notification:
        preview = content if len(content) <= MESSAGE_PREVIEW_LENGTH else f"{content[:MESSAGE_PREVIEW_LENGTH]}…"
        return self.notify(
            receiver_id,
            "message",
            f"New message from {sender.username}",
            preview,
            link=f"{FRONTEND_URL}/messages?user={sender.id}",
        )

    def notify_review_received(self, provider_id: int, display_name: str, rating: int) -> Notification:
        stars = "star" if rating == 1 else "stars"
        return self.notify(
            provider_id,
            "review",
            "New review",
            f"{display_name} left you a {rating} {stars} review",
            link=f"{FRONTEND_URL}/profile/{provider_id}",
        )
