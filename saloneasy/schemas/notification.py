from pydantic import BaseModel
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum

class NotificationType(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_RESCHEDULED = "booking_rescheduled"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    PAYMENT_RECEIVED = "payment_received"
    REVIEW_RECEIVED = "review_received"
    SYSTEM = "system"

class NotificationCreate(BaseModel):
    userId: str
    type: NotificationType
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None

class NotificationResponse(BaseModel):
    id: str
    userId: str
    type: NotificationType
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    read: bool = False
    readAt: Optional[datetime] = None
    createdAt: datetime
    
    class Config:
        populate_by_name = True

class NotificationEnvelope(BaseModel):
    success: bool = True
    data: NotificationResponse

class NotificationListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[NotificationResponse]
