"""Notification domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    profile_id: int
    type: str
    title: str
    content: str
    link: Optional[str] = None
    read: bool
    created_at: datetime
