from fastapi import APIRouter, Depends, status
from saloneasy.core.auth import require_role
from saloneasy.core.clock import Clock, get_clock, salon_timezone
from saloneasy.schemas.booking import (
    AppointmentRequestEnvelope, AppointmentStatusEnvelope,
    BookingCreate, BookingListEnvelope
)
from saloneasy.schemas.user import UserRole
from saloneasy.services.booking_service import (
    create_booking, get_customer_booking, get_upcoming_bookings
)

router = APIRouter()

@router.post("/request", response_model=AppointmentRequestEnvelope, status_code=status.HTTP_201_CREATED)
async def request_appointment(
    booking_in: BookingCreate,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER)),
    clock: Clock = Depends(get_clock)
):
    """
    Request an appointment; goes through the same checks as a booking
    """
    booking = await create_booking(booking_in, str(current_user["_id"]), now=clock())
    return {
        "success": True,
        "message": "Appointment request sent successfully",
        "data": booking
    }

@router.get("/upcoming", response_model=BookingListEnvelope)
async def get_upcoming_appointments(
    current_user: dict = Depends(require_role(UserRole.CUSTOMER)),
    clock: Clock = Depends(get_clock)
):
    """
    Pending and confirmed appointments from today on
    """
    today = clock().astimezone(salon_timezone()).date()
    appointments = await get_upcoming_bookings(str(current_user["_id"]), today)
    return {"success": True, "count": len(appointments), "data": appointments}

@router.get("/{booking_id}/status", response_model=AppointmentStatusEnvelope)
async def get_appointment_status(
    booking_id: str,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER))
):
    """
    Current status of one of the customer's appointments
    """
    booking = await get_customer_booking(booking_id, str(current_user["_id"]))
    return {
        "success": True,
        "data": {"status": booking["status"], "appointment": booking}
    }
