"""Profile repository - Database operations for profiles"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Profile, Review
from ..catalog.repository import CatalogRepository
from ..messaging.repository import MessageRepository
from ..notifications.repository import NotificationRepository
from ..reviews.repository import ReviewRepository

logger = logging.getLogger(__name__)


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_by_id(db: Session, profile_id: int) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def get_by_user_id(db: Session, user_id: str) -> Optional[Profile]:
        """Get profile by Clerk user id"""
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    @staticmethod
    def get_by_username(db: Session, username: str) -> Optional[Profile]:
        """Exact, case-sensitive username lookup"""
        return db.query(Profile).filter(Profile.username == username).first()

    @staticmethod
    def get_all_profiles(db: Session) -> list[Profile]:
        return db.query(Profile).order_by(Profile.id.desc()).all()

    @staticmethod
    def get_providers(db: Session) -> list[Profile]:
        return db.query(Profile).filter(Profile.role == "provider").order_by(Profile.id).all()

    @staticmethod
    def create_profile(db: Session, user_id: str, **profile_data) -> Profile:
        profile = Profile(user_id=user_id, **profile_data)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        """Update a profile with provided fields"""
        for key, value in updates.items():
            if hasattr(profile, key):
                setattr(profile, key, value)

        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def delete_profile_cascade(db: Session, profile: Profile) -> dict:
        """
        Delete a profile and everything that references it in one transaction.

        Order: services, reviews (as provider or client), messages (as sender or
        receiver), notifications, then the profile row. Providers that lose a
        review written by this profile get their rating recomputed before the
        commit. Any failure rolls the whole cascade back.
        """
        profile_id = profile.id
        try:
            affected_providers = [
                provider_id
                for provider_id in ReviewRepository.get_provider_ids_reviewed_by(db, profile_id)
                if provider_id != profile_id
            ]

            counts = {
                "services": CatalogRepository.delete_services_by_provider(db, profile_id),
                "reviews": db.query(Review)
                .filter((Review.provider_id == profile_id) | (Review.client_id == profile_id))
                .delete(synchronize_session=False),
                "messages": MessageRepository.delete_messages_for_user(db, profile_id),
                "notifications": NotificationRepository.delete_notifications_for_profile(
                    db, profile_id
                ),
            }

            for provider_id in affected_providers:
                ReviewRepository.recompute_provider_rating(db, provider_id)

            db.query(Profile).filter(Profile.id == profile_id).delete(synchronize_session=False)
            db.commit()
            db.expunge(profile)
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Failed to delete profile {profile_id}, cascade rolled back: {e}")
            raise

        return counts
