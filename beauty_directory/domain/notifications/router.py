"""Notification router - In-app notifications of the signed-in profile"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import NotificationResponse
from .service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    current_profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """Notifications of the caller, newest first"""
    return service.list_notifications(current_profile)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    service.mark_read(notification_id, current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    service.delete_notification(notification_id, current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notifications(
    current_profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    service.clear_all(current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
