"""Notification repository - Database operations for in-app notifications"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def get_notifications(db: Session, profile_id: int) -> list[Notification]:
        """Notifications of a profile, newest first"""
        return (
            db.query(Notification)
            .filter(Notification.profile_id == profile_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @staticmethod
    def get_notification_by_id(db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def add_notification(db: Session, profile_id: int, **notification_data) -> Notification:
        """Stage a notification insert, committed with the triggering write"""
        notification = Notification(profile_id=profile_id, read=False, **notification_data)
        db.add(notification)
        db.flush()
        return notification

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def delete_notification(db: Session, notification: Notification) -> None:
        db.delete(notification)
        db.commit()

    @staticmethod
    def clear_notifications(db: Session, profile_id: int) -> int:
        deleted = (
            db.query(Notification)
            .filter(Notification.profile_id == profile_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    @staticmethod
    def delete_notifications_for_profile(db: Session, profile_id: int) -> int:
        """Stage deletion of every notification owned by a profile"""
        return (
            db.query(Notification)
            .filter(Notification.profile_id == profile_id)
            .delete(synchronize_session=False)
        )
