"""Messaging service - Direct messages between profiles"""

import logging

from sqlalchemy.orm import Session

from ...models import Message, Profile
from ...shared.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..profiles.repository import ProfileRepository
from .conversations import Conversation, group_conversations
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class MessagingService:
    """Service layer for direct messages"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MessageRepository()
        self.notifications = NotificationService(db)

    def send_message(self, sender: Profile, receiver_id: int, content: str) -> Message:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty", field="content")

        if not ProfileRepository.get_by_id(self.db, receiver_id):
            raise NotFoundError("Recipient not found")

        try:
            message = self.repo.create_message(self.db, sender.id, receiver_id, content)
            if receiver_id != sender.id:
                self.notifications.notify_message_received(sender, receiver_id, content)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(message)
        logger.info(f"💬 Message {message.id} sent: {sender.id} -> {receiver_id}")
        return message

    def get_conversation(self, me: Profile, other_user_id: int) -> list[Message]:
        """Messages with one partner, oldest first; incoming ones are marked read"""
        self.repo.mark_conversation_read(self.db, me.id, other_user_id)
        return self.repo.get_conversation(self.db, me.id, other_user_id)

    def get_all_messages(self, me: Profile) -> list[Message]:
        return self.repo.get_messages_for_user(self.db, me.id)

    def list_conversations(self, me: Profile) -> list[Conversation]:
        return group_conversations(self.repo.get_messages_for_user(self.db, me.id), me.id)

    def delete_message(self, message_id: int, actor: Profile) -> None:
        message = self.repo.get_message_by_id(self.db, message_id)
        if not message:
            raise NotFoundError("Message not found")
        if actor.id not in (message.sender_id, message.receiver_id):
            raise ForbiddenError("You can only delete messages in your own conversations")

        self.repo.delete_message(self.db, message)

    def delete_conversation(self, me: Profile, other_user_id: int) -> int:
        deleted = self.repo.delete_conversation(self.db, me.id, other_user_id)
        logger.info(f"🗑️ Deleted conversation {me.id} <-> {other_user_id} ({deleted} message(s))")
        return deleted
