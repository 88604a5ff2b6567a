from fastapi import APIRouter, Depends, Query
from typing import Optional
from datetime import date
from saloneasy.core.auth import require_role
from saloneasy.schemas.booking import BookingEnvelope, BookingListEnvelope, BookingStatus, BookingStatusUpdate
from saloneasy.schemas.user import UserRole
from saloneasy.services.booking_service import get_salon_bookings, update_booking_status

router = APIRouter()

@router.get("/salons/{salon_id}/bookings", response_model=BookingListEnvelope)
async def list_salon_bookings(
    salon_id: str,
    status: Optional[BookingStatus] = None,
    day: Optional[date] = Query(None, alias="date"),
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    """
    Bookings of one of the current owner's salons
    """
    bookings = await get_salon_bookings(
        salon_id,
        str(current_user["_id"]),
        status=status,
        day=day
    )
    return {"success": True, "count": len(bookings), "data": bookings}

@router.put("/bookings/{booking_id}/status", response_model=BookingEnvelope)
async def change_booking_status(
    booking_id: str,
    status_update: BookingStatusUpdate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER, UserRole.ADMIN))
):
    """
    Confirm, complete or cancel a booking of the owner's salon

    - **status**: Target status; only pending -> confirmed/cancelled and
      confirmed -> completed/cancelled are accepted
    """
    booking = await update_booking_status(
        booking_id,
        status_update.status,
        str(current_user["_id"]),
        is_admin=current_user.get("role") == UserRole.ADMIN
    )
    return {"success": True, "data": booking}
