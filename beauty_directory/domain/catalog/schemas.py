"""Catalog domain schemas - Pydantic models for provider services"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ServiceCreate(BaseModel):
    """Schema for adding a service to a provider's catalog"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[str] = Field(default=None, max_length=50)
    duration: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Service name is required")
        return v

    @field_validator("price", "description")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class ServiceUpdate(BaseModel):
    """Schema for patching a service in place (admin)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[str] = Field(default=None, max_length=50)
    duration: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Service name is required")
        return v


class ServiceResponse(BaseModel):
    """Schema for service response"""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    provider_id: int
    name: str
    description: Optional[str] = None
    price: Optional[str] = None
    duration: Optional[int] = None
