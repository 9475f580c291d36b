"""Catalog router - FastAPI endpoints for provider services"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import ServiceCreate, ServiceResponse
from .service import CatalogService

router = APIRouter(prefix="/api/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    provider_id: int = Query(..., alias="providerId"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_services(provider_id)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    data: ServiceCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: CatalogService = Depends(get_catalog_service),
):
    """Add a service to the signed-in provider's catalog"""
    return service.create_service(data, current_profile)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_service(service_id, current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
