"""Conversation grouping for the inbox view"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Conversation:
    partner_id: int
    messages: list[Any] = field(default_factory=list)
    unread_count: int = 0

    @property
    def last_message(self):
        return self.messages[-1]


def _sort_key(message):
    return (message.created_at, message.id)


def group_conversations(messages: Iterable, me: int) -> list[Conversation]:
    """
    Group a flat message sequence into conversations keyed by the other party.

    Messages a profile sent to itself are dropped. Each conversation keeps its
    messages oldest first, and conversations are ordered by their most recent
    message, newest first. ``unread_count`` counts messages received by ``me``
    that are still unread.

    Works on anything with ``sender_id``, ``receiver_id``, ``created_at``,
    ``id`` and ``read`` attributes, so ORM rows and plain objects both group.
    """
    threads: dict[int, Conversation] = {}

    for message in messages:
        if message.sender_id == message.receiver_id:
            continue
        if me not in (message.sender_id, message.receiver_id):
            continue

        partner_id = message.receiver_id if message.sender_id == me else message.sender_id
        conversation = threads.setdefault(partner_id, Conversation(partner_id=partner_id))
        conversation.messages.append(message)
        if message.receiver_id == me and not message.read:
            conversation.unread_count += 1

    for conversation in threads.values():
        conversation.messages.sort(key=_sort_key)

    return sorted(threads.values(), key=lambda c: _sort_key(c.last_message), reverse=True)
