"""Review router - FastAPI endpoints for provider reviews"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import ReviewCheckResponse, ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    provider_id: int = Query(..., alias="providerId"),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews of a provider, newest first"""
    return service.get_reviews_for_provider(provider_id)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: ReviewService = Depends(get_review_service),
):
    return service.create_review(data, current_profile)


@router.get("/check/{provider_id}", response_model=ReviewCheckResponse)
async def check_review(
    provider_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: ReviewService = Depends(get_review_service),
):
    """Whether the caller already reviewed this provider"""
    review = service.get_existing_review(current_profile, provider_id)
    return ReviewCheckResponse(has_reviewed=review is not None, review_id=review.id if review else None)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: ReviewService = Depends(get_review_service),
):
    service.delete_review(review_id, current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
