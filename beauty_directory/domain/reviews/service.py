"""Review service - Review ledger and provider rating maintenance"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile, Review
from ...shared.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Anonymous"


class ReviewService:
    """
    Service layer for reviews.

    Every create/delete recomputes the provider's rating and review_count from
    a fresh read of its reviews inside the same transaction as the write, with
    the provider row locked. Readers never see a review set that disagrees with
    the aggregate, and a failed recomputation rolls the review write back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()
        self.notifications = NotificationService(db)

    def get_review(self, review_id: int) -> Review:
        review = self.repo.get_review_by_id(self.db, review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def get_reviews_for_provider(self, provider_id: int) -> list[Review]:
        return self.repo.get_reviews_by_provider(self.db, provider_id)

    def get_existing_review(self, client: Profile, provider_id: int):
        return self.repo.get_review_by_client_and_provider(self.db, client.id, provider_id)

    def create_review(self, data: ReviewCreate, client: Profile) -> Review:
        """Create a review by ``client`` and refresh the provider aggregate"""
        if client.id == data.provider_id:
            raise ValidationError("You cannot review yourself", field="providerId")

        if self.repo.get_review_by_client_and_provider(self.db, client.id, data.provider_id):
            raise ConflictError("You have already reviewed this provider")

        display_name = data.display_name or DEFAULT_DISPLAY_NAME

        try:
            provider = self.repo.lock_provider(self.db, data.provider_id)
            if not provider or provider.role != "provider":
                raise NotFoundError("Provider not found")

            review = self.repo.add_review(
                self.db,
                provider_id=data.provider_id,
                client_id=client.id,
                display_name=display_name,
                rating=data.rating,
                comment=data.comment,
            )
            rating, count = self.repo.recompute_provider_rating(self.db, data.provider_id)
            self.notifications.notify_review_received(data.provider_id, display_name, data.rating)
            self.db.commit()
        except IntegrityError as e:
            # Concurrent duplicate caught by the unique constraint
            self.db.rollback()
            logger.warning(
                f"⚠️ Duplicate review rejected: client {client.id} -> provider {data.provider_id}"
            )
            raise ConflictError("You have already reviewed this provider") from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(review)
        logger.info(
            f"⭐ Review {review.id} by profile {client.id} for provider {data.provider_id}: "
            f"rating now {rating} over {count} review(s)"
        )
        return review

    def delete_review(self, review_id: int, actor: Profile) -> None:
        """Delete a review (author or admin) and refresh the provider aggregate"""
        review = self.get_review(review_id)
        if review.client_id != actor.id and not actor.is_admin:
            raise ForbiddenError("You can only delete your own reviews")

        provider_id = review.provider_id
        try:
            self.repo.lock_provider(self.db, provider_id)
            self.repo.remove_review(self.db, review)
            rating, count = self.repo.recompute_provider_rating(self.db, provider_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"🗑️ Review {review_id} deleted by profile {actor.id}: "
            f"provider {provider_id} rating now {rating} over {count} review(s)"
        )
