"""Catalog repository - Database operations for provider services"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Service


class CatalogRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_services_by_provider(db: Session, provider_id: int) -> list[Service]:
        return (
            db.query(Service).filter(Service.provider_id == provider_id).order_by(Service.id).all()
        )

    @staticmethod
    def get_services_by_providers(db: Session, provider_ids: list[int]) -> dict[int, list[Service]]:
        """Services of several providers in one query, keyed by provider id"""
        grouped: dict[int, list[Service]] = {provider_id: [] for provider_id in provider_ids}
        if not provider_ids:
            return grouped

        services = (
            db.query(Service)
            .filter(Service.provider_id.in_(provider_ids))
            .order_by(Service.id)
            .all()
        )
        for service in services:
            grouped.setdefault(service.provider_id, []).append(service)
        return grouped

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def get_service_by_name_and_provider(
        db: Session, name: str, provider_id: int
    ) -> Optional[Service]:
        """Case-insensitive name lookup within one provider's catalog"""
        return (
            db.query(Service)
            .filter(
                Service.provider_id == provider_id,
                func.lower(Service.name) == name.strip().lower(),
            )
            .first()
        )

    @staticmethod
    def create_service(db: Session, provider_id: int, **service_data) -> Service:
        service = Service(provider_id=provider_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()

    @staticmethod
    def delete_services_by_provider(db: Session, provider_id: int) -> int:
        """Stage deletion of every service of a provider, returns row count"""
        return (
            db.query(Service)
            .filter(Service.provider_id == provider_id)
            .delete(synchronize_session=False)
        )
