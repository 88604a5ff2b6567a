from fastapi import APIRouter, Depends, Query
from typing import Any, Dict
from saloneasy.core.auth import get_current_user
from saloneasy.core.errors import NotFound
from saloneasy.schemas.notification import NotificationEnvelope, NotificationListEnvelope
from saloneasy.services.notification_service import (
    get_notifications, get_unread_notification_count,
    mark_all_notifications_read, mark_notification_read
)

router = APIRouter()

@router.get("", response_model=NotificationListEnvelope)
async def get_user_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """
    Get notifications for the current user
    """
    notifications = await get_notifications(
        str(current_user["_id"]),
        unread_only=unread_only,
        skip=skip,
        limit=limit
    )
    return {"success": True, "count": len(notifications), "data": notifications}

@router.get("/count", response_model=Dict[str, Any])
async def get_notification_count(current_user: dict = Depends(get_current_user)):
    """
    Get unread notification count for the current user
    """
    count = await get_unread_notification_count(str(current_user["_id"]))
    return {"success": True, "data": {"count": count}}

@router.put("/read-all", response_model=Dict[str, Any])
async def mark_all_as_read(current_user: dict = Depends(get_current_user)):
    """
    Mark all notifications as read
    """
    count = await mark_all_notifications_read(str(current_user["_id"]))
    return {"success": True, "data": {"count": count}}

@router.put("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_as_read(
    notification_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Mark a notification as read
    """
    notification = await mark_notification_read(notification_id, str(current_user["_id"]))
    if not notification:
        raise NotFound("Notification not found")
    return {"success": True, "data": notification}
