"""Catalog service - Business logic for provider services"""

import logging

from sqlalchemy.orm import Session

from ...models import Profile, Service
from ...shared.exceptions import ConflictError, ForbiddenError, NotFoundError
from .repository import CatalogRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for the service catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def list_services(self, provider_id: int) -> list[Service]:
        return self.repo.get_services_by_provider(self.db, provider_id)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def create_service(self, data: ServiceCreate, provider: Profile) -> Service:
        """Add a service to the caller's own catalog"""
        if provider.role != "provider":
            raise ForbiddenError("Only providers can add services")
        return self.add_service_to(provider.id, data)

    def add_service_to(self, provider_id: int, data: ServiceCreate) -> Service:
        """Add a service to any provider's catalog (admin path shares this)"""
        if self.repo.get_service_by_name_and_provider(self.db, data.name, provider_id):
            raise ConflictError(f"A service named '{data.name}' already exists", field="name")

        service = self.repo.create_service(self.db, provider_id, **data.model_dump())
        logger.info(f"✅ Service {service.id} '{service.name}' added for provider {provider_id}")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name", "") is None:
            del updates["name"]

        new_name = updates.get("name")
        if new_name and new_name.lower() != service.name.lower():
            clash = self.repo.get_service_by_name_and_provider(self.db, new_name, service.provider_id)
            if clash and clash.id != service.id:
                raise ConflictError(f"A service named '{new_name}' already exists", field="name")

        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, service_id: int, actor: Profile) -> None:
        service = self.get_service(service_id)
        if service.provider_id != actor.id and not actor.is_admin:
            raise ForbiddenError("You can only delete your own services")

        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service {service_id} deleted by profile {actor.id}")
