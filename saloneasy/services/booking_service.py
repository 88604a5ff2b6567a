from typing import Dict, Any, List, Optional
from saloneasy.core.clock import utc_now
from saloneasy.core.errors import (
    BadRequest, Forbidden, InvalidStatusTransition, InvalidTimeSlot,
    NotAuthorized, NotFound, SlotAlreadyBooked
)
from saloneasy.db.mongodb import db
from saloneasy.schemas.booking import ACTIVE_BOOKING_STATUSES, BookingCreate, BookingStatus
from saloneasy.schemas.notification import NotificationType
from saloneasy.services.booking_lifecycle import ensure_active, ensure_transition, is_active
from saloneasy.services.catalog_service import get_service_by_id
from saloneasy.services.notification_service import notify_users
from saloneasy.services.salon_service import get_owned_salon, get_salon_by_id
from saloneasy.services.scheduling import is_future_slot, normalize_time_label, to_storage_date
from saloneasy.utils.mongo import parse_object_id, with_id
from datetime import date, datetime
from pymongo.errors import DuplicateKeyError
from bson import ObjectId
import logging
import uuid

logger = logging.getLogger(__name__)

ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_BOOKING_STATUSES]

STATUS_NOTIFICATIONS = {
    BookingStatus.CONFIRMED: NotificationType.BOOKING_CONFIRMED,
    BookingStatus.COMPLETED: NotificationType.BOOKING_COMPLETED,
    BookingStatus.CANCELLED: NotificationType.BOOKING_CANCELLED,
}

def generate_booking_reference() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"

def _describe(booking: Dict[str, Any]) -> str:
    return f"{booking['date']:%Y-%m-%d} at {booking['time']}"

async def apply_booking_update(booking: Dict[str, Any], update_data: Dict[str, Any]) -> None:
    """
    Write ``update_data`` only if the booking still has the status it was
    checked against.

    A booking changed by another request in the meantime is left alone and
    the caller gets InvalidStatusTransition. Writes that would put a second
    active booking on a slot become SlotAlreadyBooked.
    """
    try:
        result = await db.db.bookings.update_one(
            {"_id": booking["_id"], "status": booking["status"]},
            {"$set": update_data}
        )
    except DuplicateKeyError:
        logger.warning(f"Update of booking {booking['bookingId']} rejected by the active slot index")
        raise SlotAlreadyBooked("Time slot already booked")

    if result.matched_count == 0:
        logger.warning(f"Booking {booking['bookingId']} changed while it was being updated")
        raise InvalidStatusTransition(f"Booking is no longer {booking['status']}")

async def get_booking_by_id(booking_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a booking by ID
    """
    object_id = parse_object_id(booking_id)
    if object_id is None:
        return None
    booking = await db.db.bookings.find_one({"_id": object_id})
    return with_id(booking)

async def find_conflicting_booking(
    salon_id: str,
    day: date,
    time_label: str,
    exclude_id: Optional[ObjectId] = None
) -> Optional[Dict[str, Any]]:
    """
    Find an active booking holding the (salon, date, time) slot
    """
    query = {
        "salon": salon_id,
        "date": to_storage_date(day),
        "time": time_label,
        "status": {"$in": ACTIVE_STATUS_VALUES},
    }
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}

    return await db.db.bookings.find_one(query)

async def get_occupied_times(salon_id: str, day: date) -> List[str]:
    """
    Time labels held by active bookings of a salon on one day
    """
    cursor = db.db.bookings.find(
        {
            "salon": salon_id,
            "date": to_storage_date(day),
            "status": {"$in": ACTIVE_STATUS_VALUES},
        },
        {"time": 1},
    )
    bookings = await cursor.to_list(length=None)
    return [booking["time"] for booking in bookings]

async def create_booking(
    booking_in: BookingCreate,
    customer_id: str,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Validate and create a booking in pending status.

    The slot must start strictly after ``now`` and must not be held by another
    pending or confirmed booking. The unique index on active slots settles
    races between concurrent requests that both pass the pre-check.
    """
    now = now or utc_now()

    salon = await get_salon_by_id(booking_in.salon)
    if not salon:
        raise NotFound("Salon not found")

    service = await get_service_by_id(booking_in.service)
    if not service:
        raise NotFound("Service not found")
    if service["salon"] != salon["id"]:
        raise BadRequest("Service is not offered by this salon")

    time_label = normalize_time_label(booking_in.time)

    if not is_future_slot(booking_in.date, time_label, now):
        raise InvalidTimeSlot("Cannot book appointments in the past")

    if await find_conflicting_booking(salon["id"], booking_in.date, time_label):
        logger.warning(f"Slot {booking_in.date} {time_label} already booked at salon {salon['id']}")
        raise SlotAlreadyBooked("Time slot already booked")

    booking_data = {
        "bookingId": generate_booking_reference(),
        "customer": customer_id,
        "salon": salon["id"],
        "service": service["id"],
        "date": to_storage_date(booking_in.date),
        "time": time_label,
        "duration": service["duration"],
        "status": BookingStatus.PENDING.value,
        "occupiesSlot": True,
        "totalAmount": booking_in.totalAmount if booking_in.totalAmount is not None else service["price"],
        "notes": booking_in.notes,
        "createdAt": datetime.utcnow(),
    }

    try:
        result = await db.db.bookings.insert_one(booking_data)
    except DuplicateKeyError:
        logger.warning(f"Concurrent booking lost the race for {booking_in.date} {time_label} at salon {salon['id']}")
        raise SlotAlreadyBooked("Time slot already booked")

    created_booking = await get_booking_by_id(str(result.inserted_id))
    logger.info(f"Booking {created_booking['bookingId']} created for customer {customer_id}")

    await notify_users(
        [customer_id],
        NotificationType.BOOKING_CREATED,
        "Booking received",
        f"Your {service['name']} appointment at {salon['name']} on {_describe(created_booking)} is pending confirmation.",
        {"bookingId": created_booking["id"]},
    )
    await notify_users(
        [salon["owner"]],
        NotificationType.BOOKING_CREATED,
        "New booking",
        f"New {service['name']} booking at {salon['name']} on {_describe(created_booking)}.",
        {"bookingId": created_booking["id"]},
    )

    return created_booking

async def reschedule_booking(
    booking_id: str,
    day: date,
    time: str,
    customer_id: str,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Move a booking to a new date/time.

    Only the owning customer may reschedule, and only while the booking is
    pending or confirmed. The booking never conflicts with itself, so moving
    it onto its own current slot succeeds. On any rejection the stored booking
    is left untouched.
    """
    now = now or utc_now()

    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if booking["customer"] != customer_id:
        raise NotAuthorized("Not authorized to reschedule this booking")

    ensure_active(booking["status"], "reschedule")

    time_label = normalize_time_label(time)

    if not is_future_slot(day, time_label, now):
        raise InvalidTimeSlot("Cannot reschedule to past time")

    if await find_conflicting_booking(booking["salon"], day, time_label, exclude_id=booking["_id"]):
        logger.warning(f"Reschedule of {booking['bookingId']} rejected: {day} {time_label} already booked")
        raise SlotAlreadyBooked("Time slot already booked")

    await apply_booking_update(booking, {
        "date": to_storage_date(day),
        "time": time_label,
        "updatedAt": datetime.utcnow(),
    })

    updated_booking = await get_booking_by_id(booking_id)
    logger.info(f"Booking {updated_booking['bookingId']} rescheduled to {_describe(updated_booking)}")

    salon = await get_salon_by_id(booking["salon"])
    await notify_users(
        [salon["owner"] if salon else None],
        NotificationType.BOOKING_RESCHEDULED,
        "Booking rescheduled",
        f"Booking {updated_booking['bookingId']} moved to {_describe(updated_booking)}.",
        {"bookingId": updated_booking["id"]},
    )

    return updated_booking

async def set_booking_status(
    booking: Dict[str, Any],
    new_status: BookingStatus,
    extra_fields: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Apply a checked status transition and keep ``occupiesSlot`` in step
    """
    target = ensure_transition(booking["status"], new_status)

    update_data = {
        "status": target.value,
        "occupiesSlot": is_active(target),
        "updatedAt": datetime.utcnow(),
    }
    if extra_fields:
        update_data.update(extra_fields)

    await apply_booking_update(booking, update_data)

    updated_booking = await get_booking_by_id(booking["id"])
    logger.info(f"Booking {updated_booking['bookingId']} moved from {booking['status']} to {target.value}")

    salon = await get_salon_by_id(booking["salon"])
    await notify_users(
        [booking["customer"], salon["owner"] if salon else None],
        STATUS_NOTIFICATIONS[target],
        f"Booking {target.value}",
        f"Booking {updated_booking['bookingId']} on {_describe(updated_booking)} is now {target.value}.",
        {"bookingId": updated_booking["id"]},
    )

    return updated_booking

async def cancel_booking(booking_id: str, customer_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
    """
    Cancel a booking as its customer; frees the slot
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if booking["customer"] != customer_id:
        raise NotAuthorized("Not authorized to cancel this booking")

    ensure_active(booking["status"], "cancel")

    extra_fields = {"cancellationReason": reason} if reason else None
    return await set_booking_status(booking, BookingStatus.CANCELLED, extra_fields)

async def update_booking_status(
    booking_id: str,
    new_status: BookingStatus,
    requester_id: str,
    is_admin: bool = False
) -> Dict[str, Any]:
    """
    Change a booking's status as the owner of its salon (or an admin)
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if not is_admin:
        salon = await get_salon_by_id(booking["salon"])
        if not salon or salon["owner"] != requester_id:
            raise Forbidden("Not authorized to update this booking")

    return await set_booking_status(booking, new_status)

async def get_booking_for_viewer(booking_id: str, user_id: str, is_admin: bool = False) -> Dict[str, Any]:
    """
    Get a booking visible to its customer, the salon owner or an admin
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if is_admin or booking["customer"] == user_id:
        return booking

    salon = await get_salon_by_id(booking["salon"])
    if not salon or salon["owner"] != user_id:
        raise Forbidden("You don't have access to this booking")

    return booking

async def get_customer_booking(booking_id: str, customer_id: str) -> Dict[str, Any]:
    """
    Get a booking that must belong to ``customer_id``
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise NotFound("Appointment not found")
    if booking["customer"] != customer_id:
        raise NotAuthorized("Not authorized")
    return booking

async def get_customer_bookings(
    customer_id: str,
    status: Optional[BookingStatus] = None,
    skip: int = 0,
    limit: int = 50
) -> List[Dict[str, Any]]:
    """
    Get bookings for a customer, newest first
    """
    query = {"customer": customer_id}

    if status:
        query["status"] = BookingStatus(status).value

    cursor = db.db.bookings.find(query, sort=[("createdAt", -1)], skip=skip, limit=limit)
    bookings = await cursor.to_list(length=limit)
    return [with_id(booking) for booking in bookings]

async def get_upcoming_bookings(customer_id: str, today: date) -> List[Dict[str, Any]]:
    """
    Active bookings of a customer from ``today`` on, soonest first
    """
    cursor = db.db.bookings.find(
        {
            "customer": customer_id,
            "date": {"$gte": to_storage_date(today)},
            "status": {"$in": ACTIVE_STATUS_VALUES},
        },
        sort=[("date", 1), ("time", 1)],
    )
    bookings = await cursor.to_list(length=None)
    return [with_id(booking) for booking in bookings]

async def get_salon_bookings(
    salon_id: str,
    owner_id: str,
    status: Optional[BookingStatus] = None,
    day: Optional[date] = None
) -> List[Dict[str, Any]]:
    """
    Bookings of a salon the requester owns, latest date first
    """
    salon = await get_owned_salon(salon_id, owner_id)

    query = {"salon": salon["id"]}
    if status:
        query["status"] = BookingStatus(status).value
    if day:
        query["date"] = to_storage_date(day)

    cursor = db.db.bookings.find(query, sort=[("date", -1), ("time", 1)])
    bookings = await cursor.to_list(length=None)
    return [with_id(booking) for booking in bookings]
