"""Directory router - Provider listing and map dataset"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import split_multi_value
from ..catalog.schemas import ServiceResponse
from ..profiles.schemas import ProfileResponse, ProfileWithServices
from .service import DirectoryEntry, DirectoryFilters, DirectoryService

# Shares the /api/profiles prefix, include before the profiles router so
# these static paths win over /api/profiles/{profile_id}
router = APIRouter(prefix="/api/profiles", tags=["Directory"])


def get_directory_service(db: Session = Depends(get_db)) -> DirectoryService:
    """Dependency injection for DirectoryService"""
    return DirectoryService(db)


def get_directory_filters(
    search: Optional[str] = Query(None),
    services: Optional[list[str]] = Query(None),
    location_types: Optional[list[str]] = Query(None, alias="locationTypes"),
) -> DirectoryFilters:
    """Accepts repeated params (?services=a&services=b) or comma separated values"""
    return DirectoryFilters(
        search=search,
        services=split_multi_value(services),
        location_types=split_multi_value(location_types),
    )


def to_response(entry: DirectoryEntry) -> ProfileWithServices:
    return ProfileWithServices(
        **ProfileResponse.model_validate(entry.profile).model_dump(),
        services=[ServiceResponse.model_validate(s) for s in entry.services],
    )


@router.get("", response_model=list[ProfileWithServices])
async def list_providers(
    filters: DirectoryFilters = Depends(get_directory_filters),
    service: DirectoryService = Depends(get_directory_service),
):
    """Every provider with its services, narrowed by the optional filters"""
    return [to_response(entry) for entry in service.list_providers(filters)]


@router.get("/map", response_model=list[ProfileWithServices])
async def list_map_providers(
    filters: DirectoryFilters = Depends(get_directory_filters),
    service: DirectoryService = Depends(get_directory_service),
):
    """Providers that can be pinned on the map (fixed location, valid coordinates)"""
    return [to_response(entry) for entry in service.map_providers(filters)]
