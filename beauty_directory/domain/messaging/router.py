"""Messaging router - FastAPI endpoints for direct messages"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import ConversationResponse, MessageCreate, MessageResponse
from .service import MessagingService

router = APIRouter(prefix="/api/messages", tags=["Messages"])


def get_messaging_service(db: Session = Depends(get_db)) -> MessagingService:
    """Dependency injection for MessagingService"""
    return MessagingService(db)


@router.get("", response_model=list[MessageResponse])
async def get_messages(
    other_user_id: Optional[int] = Query(None, alias="otherUserId"),
    current_profile: Profile = Depends(get_current_profile),
    service: MessagingService = Depends(get_messaging_service),
):
    """One conversation when otherUserId is given, otherwise every message of the caller"""
    if other_user_id is not None:
        return service.get_conversation(current_profile, other_user_id)
    return service.get_all_messages(current_profile)


@router.get("/conversations", response_model=list[ConversationResponse])
async def get_conversations(
    current_profile: Profile = Depends(get_current_profile),
    service: MessagingService = Depends(get_messaging_service),
):
    """Inbox: conversations grouped by partner, most recent first"""
    return service.list_conversations(current_profile)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: MessagingService = Depends(get_messaging_service),
):
    return service.send_message(current_profile, data.receiver_id, data.content)


@router.delete("/conversation/{other_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    other_user_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: MessagingService = Depends(get_messaging_service),
):
    service.delete_conversation(current_profile, other_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: MessagingService = Depends(get_messaging_service),
):
    service.delete_message(message_id, current_profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
