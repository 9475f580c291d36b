"""Profile service - Business logic for profile operations"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile, utcnow
from ...shared.exceptions import ConflictError, NotFoundError
from ..catalog.repository import CatalogRepository
from ..reviews.repository import ReviewRepository
from .repository import ProfileRepository
from .schemas import ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)

# Fields a caller may never write through the generic update path
PROTECTED_FIELDS = {"id", "user_id", "username", "username_changed_at", "is_admin", "rating", "review_count"}


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_profile(self, profile_id: int) -> Profile:
        profile = self.repo.get_by_id(self.db, profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def get_profile_by_user_id(self, user_id: str) -> Profile:
        profile = self.repo.get_by_user_id(self.db, user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def get_profile_detail(self, profile_id: int) -> dict:
        """Public profile page: the profile with its services and reviews"""
        profile = self.get_profile(profile_id)
        return {
            "profile": profile,
            "services": CatalogRepository.get_services_by_provider(self.db, profile.id),
            "reviews": ReviewRepository.get_reviews_by_provider(self.db, profile.id),
        }

    def list_profiles(self) -> list[Profile]:
        return self.repo.get_all_profiles(self.db)

    def is_username_available(self, username: str) -> bool:
        return self.repo.get_by_username(self.db, username.strip()) is None

    def create_profile(self, user_id: str, data: ProfileCreate) -> Profile:
        """Onboard the profile owned by ``user_id``"""
        logger.info(f"📥 Creating profile for user_id: {user_id}")

        if self.repo.get_by_user_id(self.db, user_id):
            raise ConflictError("Profile already exists for this account")
        if not self.is_username_available(data.username):
            raise ConflictError("Username is already taken", field="username")

        profile_data = data.model_dump()

        try:
            profile = self.repo.create_profile(self.db, user_id, **profile_data)
        except IntegrityError as e:
            # Lost a race on user_id or username
            self.db.rollback()
            logger.warning(f"⚠️ Profile create for {user_id} hit a uniqueness violation")
            raise ConflictError("Username is already taken", field="username") from e

        logger.info(f"✅ Created profile {profile.id} ({profile.username}, {profile.role})")
        return profile

    def update_profile(self, profile: Profile, data: ProfileUpdate) -> Profile:
        """Partial update, only fields present in the payload are written"""
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if key not in PROTECTED_FIELDS
        }
        if updates.get("role", "") is None:
            del updates["role"]
        if not updates:
            return profile
        return self.repo.update_profile(self.db, profile, **updates)

    def update_username(self, profile: Profile, username: str) -> Profile:
        if username == profile.username:
            return profile

        existing = self.repo.get_by_username(self.db, username)
        if existing and existing.id != profile.id:
            raise ConflictError("Username is already taken", field="username")

        old_username = profile.username
        try:
            profile = self.repo.update_profile(
                self.db, profile, username=username, username_changed_at=utcnow()
            )
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Username is already taken", field="username") from e

        logger.info(f"✏️ Profile {profile.id} renamed {old_username} -> {username}")
        return profile

    def delete_profile(self, profile: Profile) -> dict:
        profile_id = profile.id
        counts = self.repo.delete_profile_cascade(self.db, profile)
        logger.info(
            f"🗑️ Deleted profile {profile_id} with {counts['services']} service(s), "
            f"{counts['reviews']} review(s), {counts['messages']} message(s), "
            f"{counts['notifications']} notification(s)"
        )
        return counts
