from fastapi import APIRouter, Body, Depends, Query, status
from typing import Optional
from saloneasy.core.auth import get_current_user, require_role
from saloneasy.core.clock import Clock, get_clock
from saloneasy.schemas.booking import (
    BookingCancel, BookingCreate, BookingEnvelope, BookingListEnvelope,
    BookingReschedule, BookingStatus
)
from saloneasy.schemas.user import UserRole
from saloneasy.services.booking_service import (
    cancel_booking, create_booking, get_booking_for_viewer,
    get_customer_bookings, reschedule_booking
)

router = APIRouter()

@router.get("", response_model=BookingListEnvelope)
async def get_my_bookings(
    status: Optional[BookingStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: dict = Depends(require_role(UserRole.CUSTOMER))
):
    """
    Get the current customer's bookings, newest first
    """
    bookings = await get_customer_bookings(
        str(current_user["_id"]),
        status=status,
        skip=skip,
        limit=limit
    )
    return {"success": True, "count": len(bookings), "data": bookings}

@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_new_booking(
    booking_in: BookingCreate,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER)),
    clock: Clock = Depends(get_clock)
):
    """
    Book a slot as a customer

    Fails with 400 when the slot is in the past or already taken.
    """
    booking = await create_booking(booking_in, str(current_user["_id"]), now=clock())
    return {"success": True, "data": booking}

@router.get("/{booking_id}", response_model=BookingEnvelope)
async def get_booking(
    booking_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Get booking details (customer, salon owner or admin)
    """
    booking = await get_booking_for_viewer(
        booking_id,
        str(current_user["_id"]),
        is_admin=current_user.get("role") == UserRole.ADMIN
    )
    return {"success": True, "data": booking}

@router.put("/{booking_id}/cancel", response_model=BookingEnvelope)
async def cancel_booking_endpoint(
    booking_id: str,
    cancel_data: Optional[BookingCancel] = Body(None),
    current_user: dict = Depends(require_role(UserRole.CUSTOMER))
):
    """
    Cancel a booking
    """
    reason = cancel_data.reason if cancel_data else None
    booking = await cancel_booking(booking_id, str(current_user["_id"]), reason)
    return {"success": True, "data": booking}

@router.put("/{booking_id}/reschedule", response_model=BookingEnvelope)
async def reschedule_booking_endpoint(
    booking_id: str,
    reschedule_data: BookingReschedule,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER)),
    clock: Clock = Depends(get_clock)
):
    """
    Move a booking to a new date and time

    - **date**: New date for the booking
    - **time**: New slot label (format: HH:MM)
    """
    booking = await reschedule_booking(
        booking_id,
        reschedule_data.date,
        reschedule_data.time,
        str(current_user["_id"]),
        now=clock()
    )
    return {"success": True, "data": booking}
