"""Messaging domain schemas - Pydantic models for validation"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MessageCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    receiver_id: int
    content: str = Field(max_length=5000)


class MessageResponse(BaseModel):
    """Schema for message response"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime
    read: bool


class ConversationResponse(BaseModel):
    """One conversation thread as shown in the inbox"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    partner_id: int
    messages: list[MessageResponse]
    last_message: MessageResponse
    unread_count: int
