"""Admin service - Dashboard aggregates and admin actions on any account"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile, Service, utcnow
from ...shared.exceptions import ConflictError
from ..catalog.schemas import ServiceCreate, ServiceUpdate
from ..catalog.service import CatalogService
from ..profiles.schemas import AdminProfileCreate, AdminProfileUpdate
from ..profiles.service import ProfileService
from .repository import AdminRepository
from .schemas import AdminStats, LocationTypeCount

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for the admin dashboard"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()
        self.profiles = ProfileService(db)
        self.catalog = CatalogService(db)

    def get_stats(self) -> AdminStats:
        by_role = self.repo.count_profiles_by_role(self.db)
        return AdminStats(
            total_users=sum(by_role.values()),
            total_providers=by_role.get("provider", 0),
            total_clients=by_role.get("client", 0),
            messages_sent=self.repo.count_messages(self.db),
            providers_by_location_type=[
                LocationTypeCount(location_type=location_type, count=count)
                for location_type, count in self.repo.count_providers_by_location_type(self.db)
            ],
        )

    def record_page_visit(self) -> None:
        self.repo.record_page_visit(self.db)

    def get_page_visit_count(self) -> int:
        return self.repo.count_page_visits(self.db)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def create_demo_profile(self, data: AdminProfileCreate, admin: Profile) -> Profile:
        """Create a profile that is not bound to a real sign-in"""
        user_id = f"demo_{uuid.uuid4()}"
        profile = self.profiles.create_profile(user_id, data)
        logger.info(f"🛠️ Admin {admin.id} created demo profile {profile.id} ({profile.username})")
        return profile

    def update_profile(self, profile_id: int, data: AdminProfileUpdate, admin: Profile) -> Profile:
        profile = self.profiles.get_profile(profile_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("role", "") is None:
            del updates["role"]

        username = updates.pop("username", None)
        if username and username != profile.username:
            existing = self.profiles.repo.get_by_username(self.db, username)
            if existing and existing.id != profile.id:
                raise ConflictError("Username is already taken", field="username")
            updates["username"] = username
            updates["username_changed_at"] = utcnow()

        if updates:
            try:
                profile = self.profiles.repo.update_profile(self.db, profile, **updates)
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError("Username is already taken", field="username") from e
        logger.info(f"🛠️ Admin {admin.id} updated profile {profile_id}: {sorted(updates)}")
        return profile

    def delete_profile(self, profile_id: int, admin: Profile) -> None:
        profile = self.profiles.get_profile(profile_id)
        self.profiles.delete_profile(profile)
        logger.info(f"🛠️ Admin {admin.id} deleted profile {profile_id}")

    # ------------------------------------------------------------------
    # Services of any provider
    # ------------------------------------------------------------------

    def list_services(self, profile_id: int) -> list[Service]:
        self.profiles.get_profile(profile_id)
        return self.catalog.list_services(profile_id)

    def create_service(self, profile_id: int, data: ServiceCreate, admin: Profile) -> Service:
        self.profiles.get_profile(profile_id)
        service = self.catalog.add_service_to(profile_id, data)
        logger.info(f"🛠️ Admin {admin.id} added service {service.id} to profile {profile_id}")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, admin: Profile) -> Service:
        service = self.catalog.update_service(service_id, data)
        logger.info(f"🛠️ Admin {admin.id} updated service {service_id}")
        return service

    def delete_service(self, service_id: int, admin: Profile) -> None:
        self.catalog.delete_service(service_id, admin)
