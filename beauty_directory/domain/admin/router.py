"""Admin router - Dashboard statistics and admin actions, plus the public page-visit beacon"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...config import PAGE_VISIT_RPM
from ...database import get_db
from ...models import Profile
from ...rate_limiter import create_rate_limiter
from ..catalog.schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from ..profiles.schemas import AdminProfileCreate, AdminProfileUpdate, ProfileResponse
from .schemas import AdminStats, PageVisitCount
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])
visits_router = APIRouter(prefix="/api/page-visits", tags=["Page Visits"])

page_visit_rate_limit = create_rate_limiter(
    limit=PAGE_VISIT_RPM, window_seconds=60, key_prefix="page_visits"
)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_stats()


@router.get("/page-visits", response_model=PageVisitCount)
async def get_page_visits(
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return PageVisitCount(count=service.get_page_visit_count())


# ============================================================================
# PROFILES
# ============================================================================


@router.get("/profiles", response_model=list[ProfileResponse])
async def list_profiles(
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Every profile, newest first"""
    return service.profiles.list_profiles()


@router.post("/profiles", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: AdminProfileCreate,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Create a demo profile that is not tied to a sign-in"""
    return service.create_demo_profile(data, admin)


@router.get("/profiles/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: int,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.profiles.get_profile(profile_id)


@router.put("/profiles/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: int,
    data: AdminProfileUpdate,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_profile(profile_id, data, admin)


@router.delete("/profiles/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: int,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_profile(profile_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# SERVICES
# ============================================================================


@router.get("/profiles/{profile_id}/services", response_model=list[ServiceResponse])
async def list_profile_services(
    profile_id: int,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_services(profile_id)


@router.post(
    "/profiles/{profile_id}/services",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_profile_service(
    profile_id: int,
    data: ServiceCreate,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.create_service(profile_id, data, admin)


@router.put("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_service(service_id, data, admin)


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    admin: Profile = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_service(service_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# PAGE VISITS (public)
# ============================================================================


@visits_router.post("", status_code=status.HTTP_204_NO_CONTENT)
async def record_page_visit(
    _: None = Depends(page_visit_rate_limit),
    service: AdminService = Depends(get_admin_service),
):
    """Count a landing page view"""
    service.record_page_visit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
