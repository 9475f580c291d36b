"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...shared.validators import (
    normalize_instagram,
    validate_latitude,
    validate_location_type,
    validate_longitude,
    validate_username,
)
from ..catalog.schemas import ServiceResponse
from ..reviews.schemas import ReviewResponse

Role = Literal["client", "provider"]


class _ProfileFields(BaseModel):
    """Editable profile fields shared by create and update payloads"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    bio: Optional[str] = Field(default=None, max_length=2000)
    instagram: Optional[str] = Field(default=None, max_length=255)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=500)
    location_type: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("instagram")
    @classmethod
    def validate_instagram(cls, v):
        return normalize_instagram(v)

    @field_validator("location_type")
    @classmethod
    def validate_location_type(cls, v):
        return validate_location_type(v)

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v):
        return validate_longitude(v)


class ProfileCreate(_ProfileFields):
    """Schema for onboarding a new profile"""

    username: str
    role: Role = "client"

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return validate_username(v)


class ProfileUpdate(_ProfileFields):
    """Schema for partially updating a profile (username and identity excluded)"""

    role: Optional[Role] = None


class AdminProfileCreate(ProfileCreate):
    """Schema for an admin creating a demo account"""

    role: Role = "provider"


class AdminProfileUpdate(ProfileUpdate):
    """Schema for an admin editing any profile, username included"""

    username: Optional[str] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if v is None:
            return v
        return validate_username(v)


class UsernameUpdate(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return validate_username(v)


class UsernameCheck(BaseModel):
    username: str


class UsernameAvailability(BaseModel):
    available: bool


class ProfileResponse(BaseModel):
    """Schema for profile response"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: str
    username: str
    username_changed_at: Optional[datetime] = None
    role: str
    is_admin: bool
    bio: Optional[str] = None
    instagram: Optional[str] = None
    profile_image_url: Optional[str] = None
    location: Optional[str] = None
    location_type: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: float
    review_count: int


class ProfileWithServices(ProfileResponse):
    """Directory listing entry"""

    services: list[ServiceResponse] = []


class ProfileDetail(ProfileWithServices):
    """Public profile page: profile, services and reviews (newest first)"""

    reviews: list[ReviewResponse] = []
