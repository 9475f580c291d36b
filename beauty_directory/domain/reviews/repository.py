"""Review repository - Database operations for reviews and the provider rating aggregate"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Profile, Review

logger = logging.getLogger(__name__)


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.id == review_id).first()

    @staticmethod
    def get_reviews_by_provider(db: Session, provider_id: int) -> list[Review]:
        """Reviews of a provider, newest first"""
        return (
            db.query(Review)
            .filter(Review.provider_id == provider_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    @staticmethod
    def get_review_by_client_and_provider(
        db: Session, client_id: int, provider_id: int
    ) -> Optional[Review]:
        return (
            db.query(Review)
            .filter(Review.client_id == client_id, Review.provider_id == provider_id)
            .first()
        )

    @staticmethod
    def lock_provider(db: Session, provider_id: int) -> Optional[Profile]:
        """
        Load the provider row with a row lock (SELECT ... FOR UPDATE).

        Serializes concurrent review writes for the same provider until the
        surrounding transaction ends. SQLite ignores FOR UPDATE and relies on
        its database-level write lock instead.
        """
        return db.query(Profile).filter(Profile.id == provider_id).with_for_update().first()

    @staticmethod
    def recompute_provider_rating(db: Session, provider_id: int) -> tuple[float, int]:
        """
        Recompute rating and review_count for a provider from a fresh read of
        its reviews. Flushes, never commits: callers own the transaction.
        """
        db.flush()
        count, total = (
            db.query(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
            .filter(Review.provider_id == provider_id)
            .one()
        )
        rating = (total / count) if count else 0.0

        db.query(Profile).filter(Profile.id == provider_id).update(
            {Profile.rating: float(rating), Profile.review_count: int(count)},
            synchronize_session="fetch",
        )
        db.flush()
        logger.debug(f"📊 Provider {provider_id} aggregate: rating={rating}, count={count}")
        return float(rating), int(count)

    @staticmethod
    def add_review(db: Session, **review_data) -> Review:
        """Stage a review insert without committing"""
        review = Review(**review_data)
        db.add(review)
        db.flush()
        return review

    @staticmethod
    def remove_review(db: Session, review: Review) -> None:
        """Stage a review delete without committing"""
        db.delete(review)
        db.flush()

    @staticmethod
    def get_provider_ids_reviewed_by(db: Session, client_id: int) -> list[int]:
        rows = (
            db.query(Review.provider_id).filter(Review.client_id == client_id).distinct().all()
        )
        return [row[0] for row in rows]
