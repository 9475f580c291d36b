"""Message repository - Database operations for direct messages"""

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import Message


def _between(user_a: int, user_b: int):
    """Filter matching messages exchanged by two profiles, either direction"""
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


class MessageRepository:
    """Repository for message database operations"""

    @staticmethod
    def get_message_by_id(db: Session, message_id: int) -> Optional[Message]:
        return db.query(Message).filter(Message.id == message_id).first()

    @staticmethod
    def create_message(db: Session, sender_id: int, receiver_id: int, content: str) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, read=False)
        db.add(message)
        db.flush()
        return message

    @staticmethod
    def get_conversation(db: Session, user_a: int, user_b: int) -> list[Message]:
        """Messages between two profiles, oldest first"""
        return (
            db.query(Message)
            .filter(_between(user_a, user_b))
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    @staticmethod
    def get_messages_for_user(db: Session, user_id: int) -> list[Message]:
        """Every message sent or received by a profile, oldest first"""
        return (
            db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    @staticmethod
    def mark_conversation_read(db: Session, reader_id: int, partner_id: int) -> int:
        """Flag messages received by reader from partner as read, returns row count"""
        updated = (
            db.query(Message)
            .filter(
                Message.sender_id == partner_id,
                Message.receiver_id == reader_id,
                Message.read.is_(False),
            )
            .update({Message.read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def delete_message(db: Session, message: Message) -> None:
        db.delete(message)
        db.commit()

    @staticmethod
    def delete_conversation(db: Session, user_a: int, user_b: int) -> int:
        deleted = db.query(Message).filter(_between(user_a, user_b)).delete(
            synchronize_session=False
        )
        db.commit()
        return deleted

    @staticmethod
    def delete_messages_for_user(db: Session, user_id: int) -> int:
        """Stage deletion of every message sent or received by a profile"""
        return (
            db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .delete(synchronize_session=False)
        )
