from typing import Dict, Any, Iterable, List, Optional
from saloneasy.db.mongodb import db
from saloneasy.schemas.notification import NotificationType, NotificationCreate
from saloneasy.utils.mongo import parse_object_id, with_id
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

async def create_notification(notification: NotificationCreate) -> Dict[str, Any]:
    """
    Create a new in-app notification
    """
    notification_data = notification.model_dump()
    notification_data["type"] = notification.type.value
    notification_data["read"] = False
    notification_data["createdAt"] = datetime.utcnow()
    
    result = await db.db.notifications.insert_one(notification_data)
    logger.info(f"Notification {notification.type.value} queued for user {notification.userId}")
    
    created_notification = await db.db.notifications.find_one({"_id": result.inserted_id})
    return with_id(created_notification)

async def notify_users(
    user_ids: Iterable[Optional[str]],
    notification_type: NotificationType,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None
) -> List[Dict[str, Any]]:
    """
    Fan one notification out to several users, skipping blanks and repeats
    """
    created = []
    seen = set()
    for user_id in user_ids:
        if not user_id or user_id in seen:
            continue
        seen.add(user_id)
        created.append(await create_notification(NotificationCreate(
            userId=user_id,
            type=notification_type,
            title=title,
            message=message,
            data=data,
        )))
    return created

async def get_notifications(
    user_id: str,
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 20
) -> List[Dict[str, Any]]:
    """
    Get notifications for a user, newest first
    """
    query = {"userId": user_id}
    
    if unread_only:
        query["read"] = False
    
    cursor = db.db.notifications.find(query, sort=[("createdAt", -1)], skip=skip, limit=limit)
    notifications = await cursor.to_list(length=limit)
    return [with_id(notification) for notification in notifications]

async def mark_notification_read(notification_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    """
    Mark a notification as read; None when it is not the user's
    """
    object_id = parse_object_id(notification_id)
    if object_id is None:
        return None
    
    result = await db.db.notifications.update_one(
        {"_id": object_id, "userId": user_id},
        {"$set": {"read": True, "readAt": datetime.utcnow()}}
    )
    if result.matched_count == 0:
        return None
    
    updated_notification = await db.db.notifications.find_one({"_id": object_id})
    return with_id(updated_notification)

async def mark_all_notifications_read(user_id: str) -> int:
    """
    Mark all notifications as read for a user
    """
    result = await db.db.notifications.update_many(
        {"userId": user_id, "read": False},
        {"$set": {"read": True, "readAt": datetime.utcnow()}}
    )
    
    return result.modified_count

async def get_unread_notification_count(user_id: str) -> int:
    """
    Get unread notification count for a user
    """
    count = await db.db.notifications.count_documents({"userId": user_id, "read": False})
    return count
