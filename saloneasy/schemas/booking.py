from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from enum import Enum

class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Statuses whose bookings hold their (salon, date, time) slot
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

class BookingCreate(BaseModel):
    salon: str
    service: str
    date: date
    time: str = Field(..., description="Slot label, HH:MM")
    totalAmount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

class BookingReschedule(BaseModel):
    date: date
    time: str = Field(..., description="Slot label, HH:MM")

class BookingCancel(BaseModel):
    reason: Optional[str] = None

class BookingStatusUpdate(BaseModel):
    status: BookingStatus

class BookingResponse(BaseModel):
    id: str
    bookingId: str
    customer: str
    salon: str
    service: str
    date: datetime
    time: str
    duration: int
    status: BookingStatus
    totalAmount: float
    notes: Optional[str] = None
    cancellationReason: Optional[str] = None
    paidAt: Optional[datetime] = None
    createdAt: datetime
    updatedAt: Optional[datetime] = None
    
    class Config:
        populate_by_name = True

class BookingEnvelope(BaseModel):
    success: bool = True
    data: BookingResponse

class BookingListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[BookingResponse]

class AppointmentRequestEnvelope(BookingEnvelope):
    message: str = "Appointment request sent successfully"

class BookingStatusSummary(BaseModel):
    status: BookingStatus
    appointment: BookingResponse

class AppointmentStatusEnvelope(BaseModel):
    success: bool = True
    data: BookingStatusSummary
