"""Profile router - FastAPI endpoints for profile operations"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_identity, get_current_profile
from ...database import get_db
from ...models import Profile
from ..catalog.schemas import ServiceResponse
from ..reviews.schemas import ReviewResponse
from .schemas import (
    ProfileCreate,
    ProfileDetail,
    ProfileResponse,
    ProfileUpdate,
    UsernameAvailability,
    UsernameCheck,
    UsernameUpdate,
)
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(current_profile: Profile = Depends(get_current_profile)):
    """Profile of the signed-in user, 404 until onboarding is done"""
    return current_profile


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: ProfileCreate,
    user_id: str = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Onboarding: create the profile bound to the caller's identity"""
    return service.create_profile(user_id, data)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    data: ProfileUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_profile(current_profile, data)


@router.put("/me/username", response_model=ProfileResponse)
async def update_my_username(
    data: UsernameUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_username(current_profile, data.username)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_profile(
    current_profile: Profile = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
):
    """Delete the caller's profile and everything that references it"""
    service.delete_profile(current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/check-username", response_model=UsernameAvailability)
async def check_username(
    data: UsernameCheck,
    service: ProfileService = Depends(get_profile_service),
):
    return UsernameAvailability(available=service.is_username_available(data.username))


@router.get("/{profile_id}", response_model=ProfileDetail)
async def get_profile(
    profile_id: int,
    service: ProfileService = Depends(get_profile_service),
):
    """Public profile page with services and reviews (newest first)"""
    detail = service.get_profile_detail(profile_id)
    return ProfileDetail(
        **ProfileResponse.model_validate(detail["profile"]).model_dump(),
        services=[ServiceResponse.model_validate(s) for s in detail["services"]],
        reviews=[ReviewResponse.model_validate(r) for r in detail["reviews"]],
    )
