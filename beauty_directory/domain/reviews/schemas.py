"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ReviewCreate(BaseModel):
    """Schema for a client reviewing a provider"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    provider_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)
    display_name: Optional[str] = Field(default=None, max_length=255)

    @field_validator("comment", "display_name")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ReviewResponse(BaseModel):
    """Schema for review response"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    provider_id: int
    client_id: int
    display_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class ReviewCheckResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_reviewed: bool
    review_id: Optional[int] = None
