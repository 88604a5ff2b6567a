from datetime import date, datetime, timedelta

import pytest
from pymongo.errors import DuplicateKeyError

from saloneasy.core.errors import (
    BadRequest, Forbidden, InvalidStatusTransition, InvalidTimeSlot,
    NotAuthorized, NotFound, SlotAlreadyBooked
)
from saloneasy.db.mongodb import create_indexes
from saloneasy.schemas.booking import BookingCreate, BookingStatus
from saloneasy.schemas.service import ServiceCreate
from saloneasy.services import booking_service
from saloneasy.services.availability_service import get_available_slots
from saloneasy.services.booking_service import (
    cancel_booking, create_booking, get_booking_by_id, get_salon_bookings,
    get_upcoming_bookings, reschedule_booking, set_booking_status, update_booking_status
)
from saloneasy.services.catalog_service import create_service
from saloneasy.services.notification_service import get_notifications

from conftest import FROZEN_NOW, MONDAY, SUNDAY, TUESDAY


def booking_for(salon, service, time_label, day=MONDAY, **extra):
    return BookingCreate(salon=salon["id"], service=service["id"], date=day, time=time_label, **extra)


class TestCreateBooking:

    async def test_creates_pending_booking(self, salon, haircut, customer):
        booking = await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        assert booking["status"] == "pending"
        assert booking["occupiesSlot"] is True
        assert booking["time"] == "10:00"
        assert booking["date"] == datetime(2026, 3, 2)
        assert booking["customer"] == customer["id"]
        assert booking["totalAmount"] == 40
        assert booking["duration"] == 60
        assert booking["bookingId"].startswith("BK-")

    async def test_booked_time_leaves_availability(self, salon, haircut, customer):
        assert await get_available_slots(salon["id"], MONDAY) == ["09:00", "10:00", "11:00"]

        await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        assert await get_available_slots(salon["id"], MONDAY) == ["09:00", "11:00"]

    async def test_second_booking_for_same_slot_fails(self, salon, haircut, customer, make_user):
        other = await make_user("customer", "Other")
        await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(SlotAlreadyBooked):
            await create_booking(booking_for(salon, haircut, "10:00"), other["id"], now=FROZEN_NOW)

    async def test_unpadded_time_collides_with_padded(self, salon, haircut, customer):
        await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(SlotAlreadyBooked):
            await create_booking(booking_for(salon, haircut, "9:00"), customer["id"], now=FROZEN_NOW)

    async def test_current_instant_is_rejected(self, salon, haircut, customer):
        now = datetime(2026, 3, 2, 10, 0, tzinfo=FROZEN_NOW.tzinfo)

        with pytest.raises(InvalidTimeSlot):
            await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=now)

    async def test_past_slot_is_rejected(self, salon, haircut, customer):
        later = FROZEN_NOW + timedelta(days=2)

        with pytest.raises(InvalidTimeSlot):
            await create_booking(booking_for(salon, haircut, "11:00"), customer["id"], now=later)

    async def test_storage_constraint_settles_a_race(self, salon, haircut, customer, monkeypatch):
        await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        # Simulate a request that passed the pre-check before the first write landed
        async def no_conflict(*args, **kwargs):
            return None

        monkeypatch.setattr(booking_service, "find_conflicting_booking", no_conflict)

        with pytest.raises(SlotAlreadyBooked):
            await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        assert await booking_service.db.db.bookings.count_documents({"time": "10:00"}) == 1

    async def test_cancelled_booking_frees_the_slot(self, salon, haircut, customer):
        first = await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)
        await cancel_booking(first["id"], customer["id"], reason="Changed plans")

        again = await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        assert again["status"] == "pending"
        assert await get_available_slots(salon["id"], MONDAY) == ["09:00", "11:00"]

    async def test_explicit_total_amount_is_kept(self, salon, haircut, customer):
        booking = await create_booking(
            booking_for(salon, haircut, "11:00", totalAmount=55.5), customer["id"], now=FROZEN_NOW
        )
        assert booking["totalAmount"] == 55.5

    async def test_unknown_salon(self, haircut, customer):
        with pytest.raises(NotFound):
            await create_booking(
                BookingCreate(salon="0" * 24, service=haircut["id"], date=MONDAY, time="10:00"),
                customer["id"],
                now=FROZEN_NOW,
            )

    async def test_service_from_another_salon(self, salon, haircut, customer, make_user):
        from saloneasy.schemas.salon import SalonCreate
        from saloneasy.services.salon_service import create_salon

        other_owner = await make_user("salon_owner")
        other_salon = await create_salon(
            SalonCreate(name="Other", description="d", address="a", phone="p", email="e@x.test"),
            other_owner["id"],
        )
        with pytest.raises(BadRequest):
            await create_booking(booking_for(other_salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

    async def test_notifies_customer_and_owner(self, salon, haircut, customer, owner):
        await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)

        customer_notes = await get_notifications(customer["id"])
        owner_notes = await get_notifications(owner["id"])

        assert [n["type"] for n in customer_notes] == ["booking_created"]
        assert [n["type"] for n in owner_notes] == ["booking_created"]


class TestRescheduleBooking:

    async def test_conflict_leaves_booking_unchanged(self, salon, haircut, customer, make_user):
        other = await make_user("customer")
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        await create_booking(booking_for(salon, haircut, "11:00"), other["id"], now=FROZEN_NOW)

        with pytest.raises(SlotAlreadyBooked):
            await reschedule_booking(booking_a["id"], MONDAY, "11:00", customer["id"], now=FROZEN_NOW)

        stored = await get_booking_by_id(booking_a["id"])
        assert stored["time"] == "09:00"
        assert stored["date"] == datetime(2026, 3, 2)

    async def test_own_slot_is_not_a_conflict(self, salon, haircut, customer):
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        moved = await reschedule_booking(booking_a["id"], MONDAY, "09:00", customer["id"], now=FROZEN_NOW)

        assert moved["time"] == "09:00"
        assert moved["updatedAt"] is not None

    async def test_moves_to_free_slot(self, salon, haircut, customer):
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        moved = await reschedule_booking(booking_a["id"], MONDAY, "11:00", customer["id"], now=FROZEN_NOW)

        assert moved["time"] == "11:00"
        assert await get_available_slots(salon["id"], MONDAY) == ["09:00", "10:00"]

    async def test_only_owning_customer(self, salon, haircut, customer, make_user):
        intruder = await make_user("customer")
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(NotAuthorized):
            await reschedule_booking(booking_a["id"], MONDAY, "10:00", intruder["id"], now=FROZEN_NOW)

    async def test_past_target_rejected(self, salon, haircut, customer):
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(InvalidTimeSlot):
            await reschedule_booking(booking_a["id"], date(2026, 2, 23), "10:00", customer["id"], now=FROZEN_NOW)

    async def test_cancelled_booking_cannot_move(self, salon, haircut, customer):
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        await cancel_booking(booking_a["id"], customer["id"])

        with pytest.raises(InvalidStatusTransition):
            await reschedule_booking(booking_a["id"], MONDAY, "10:00", customer["id"], now=FROZEN_NOW)

    async def test_missing_booking(self, mongo, customer):
        with pytest.raises(NotFound):
            await reschedule_booking("not-an-id", MONDAY, "10:00", customer["id"], now=FROZEN_NOW)


class TestStatusChanges:

    async def test_owner_confirms_then_completes(self, salon, haircut, customer, owner):
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        confirmed = await update_booking_status(booking["id"], BookingStatus.CONFIRMED, owner["id"])
        assert confirmed["status"] == "confirmed"
        assert confirmed["occupiesSlot"] is True

        completed = await update_booking_status(booking["id"], BookingStatus.COMPLETED, owner["id"])
        assert completed["status"] == "completed"
        assert completed["occupiesSlot"] is False
        assert await get_available_slots(salon["id"], MONDAY) == ["09:00", "10:00", "11:00"]

    async def test_pending_cannot_jump_to_completed(self, salon, haircut, customer, owner):
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(InvalidStatusTransition):
            await update_booking_status(booking["id"], BookingStatus.COMPLETED, owner["id"])

    async def test_other_owner_is_forbidden(self, salon, haircut, customer, make_user):
        stranger = await make_user("salon_owner")
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        with pytest.raises(Forbidden):
            await update_booking_status(booking["id"], BookingStatus.CONFIRMED, stranger["id"])

    async def test_admin_may_change_any_booking(self, salon, haircut, customer, make_user):
        admin = await make_user("admin")
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        cancelled = await update_booking_status(booking["id"], BookingStatus.CANCELLED, admin["id"], is_admin=True)
        assert cancelled["status"] == "cancelled"

    async def test_cancel_twice(self, salon, haircut, customer):
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        cancelled = await cancel_booking(booking["id"], customer["id"], reason="Sick")
        assert cancelled["cancellationReason"] == "Sick"

        with pytest.raises(InvalidStatusTransition):
            await cancel_booking(booking["id"], customer["id"])


class TestQueries:

    async def test_upcoming_skips_inactive_and_sorts(self, salon, haircut, customer):
        late = await create_booking(booking_for(salon, haircut, "11:00"), customer["id"], now=FROZEN_NOW)
        early = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        dropped = await create_booking(booking_for(salon, haircut, "10:00"), customer["id"], now=FROZEN_NOW)
        await cancel_booking(dropped["id"], customer["id"])

        upcoming = await get_upcoming_bookings(customer["id"], FROZEN_NOW.date())

        assert [b["id"] for b in upcoming] == [early["id"], late["id"]]

    async def test_salon_bookings_are_owner_only(self, salon, haircut, customer, owner, make_user):
        await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)

        assert len(await get_salon_bookings(salon["id"], owner["id"])) == 1
        assert await get_salon_bookings(salon["id"], owner["id"], day=TUESDAY) == []

        stranger = await make_user("salon_owner")
        with pytest.raises(NotFound):
            await get_salon_bookings(salon["id"], stranger["id"])


class TestAvailability:

    async def test_closed_day_is_empty(self, salon, haircut):
        assert await get_available_slots(salon["id"], TUESDAY) == []
        assert await get_available_slots(salon["id"], SUNDAY) == []

    async def test_missing_parameters(self, mongo):
        with pytest.raises(BadRequest):
            await get_available_slots(None, MONDAY)
        with pytest.raises(BadRequest):
            await get_available_slots("abc", None)

    async def test_unknown_salon(self, mongo):
        with pytest.raises(NotFound):
            await get_available_slots("0" * 24, MONDAY)

    async def test_service_duration_sets_granularity(self, salon, owner):
        quick = await create_service(
            ServiceCreate(salon=salon["id"], name="Fringe trim", description="Quick", price=10, duration=30, category="Hair"),
            owner["id"],
        )
        slots = await get_available_slots(salon["id"], MONDAY, quick["id"])

        assert slots == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    async def test_unknown_service(self, salon):
        with pytest.raises(NotFound):
            await get_available_slots(salon["id"], MONDAY, "0" * 24)


class TestConcurrentChanges:
    """Writes based on a booking read before another request changed it."""

    async def test_stale_confirm_cannot_revive_cancelled_booking(self, salon, haircut, customer):
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        stale = await get_booking_by_id(booking["id"])
        await cancel_booking(booking["id"], customer["id"])

        with pytest.raises(InvalidStatusTransition):
            await set_booking_status(stale, BookingStatus.CONFIRMED)

        stored = await get_booking_by_id(booking["id"])
        assert stored["status"] == "cancelled"
        assert stored["occupiesSlot"] is False

    async def test_stale_confirm_after_slot_is_rebooked(self, salon, haircut, customer, make_user):
        other = await make_user("customer")
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        stale = await get_booking_by_id(booking["id"])
        await cancel_booking(booking["id"], customer["id"])
        rebooked = await create_booking(booking_for(salon, haircut, "09:00"), other["id"], now=FROZEN_NOW)

        with pytest.raises(InvalidStatusTransition):
            await set_booking_status(stale, BookingStatus.CONFIRMED)

        assert (await get_booking_by_id(rebooked["id"]))["status"] == "pending"
        assert (await get_booking_by_id(booking["id"]))["status"] == "cancelled"

    async def test_stale_reschedule_of_cancelled_booking(self, salon, haircut, customer, monkeypatch):
        booking = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        stale = await get_booking_by_id(booking["id"])
        await cancel_booking(booking["id"], customer["id"])

        async def stale_lookup(booking_id):
            return dict(stale)

        monkeypatch.setattr(booking_service, "get_booking_by_id", stale_lookup)

        with pytest.raises(InvalidStatusTransition):
            await reschedule_booking(booking["id"], MONDAY, "11:00", customer["id"], now=FROZEN_NOW)

        stored = await booking_service.db.db.bookings.find_one({"_id": stale["_id"]})
        assert stored["time"] == "09:00"
        assert stored["status"] == "cancelled"

    async def test_reschedule_race_leaves_booking_unchanged(self, salon, haircut, customer, make_user, monkeypatch):
        other = await make_user("customer")
        booking_a = await create_booking(booking_for(salon, haircut, "09:00"), customer["id"], now=FROZEN_NOW)
        await create_booking(booking_for(salon, haircut, "11:00"), other["id"], now=FROZEN_NOW)

        # Simulate the other booking landing after the pre-check
        async def no_conflict(*args, **kwargs):
            return None

        monkeypatch.setattr(booking_service, "find_conflicting_booking", no_conflict)

        with pytest.raises(SlotAlreadyBooked):
            await reschedule_booking(booking_a["id"], MONDAY, "11:00", customer["id"], now=FROZEN_NOW)

        stored = await get_booking_by_id(booking_a["id"])
        assert stored["time"] == "09:00"
        assert stored["status"] == "pending"


class TestIndexes:

    async def test_slot_index_failure_is_raised(self, mongo):
        mongomock_motor = pytest.importorskip("mongomock_motor")
        fresh = mongomock_motor.AsyncMongoMockClient()["saloneasy_dirty"]
        slot = {"salon": "s1", "date": datetime(2026, 3, 2), "time": "10:00", "occupiesSlot": True}
        await fresh.bookings.insert_many([dict(slot, bookingId="BK-1"), dict(slot, bookingId="BK-2")])

        previous = booking_service.db.db
        booking_service.db.db = fresh
        try:
            with pytest.raises(DuplicateKeyError):
                await create_indexes()
        finally:
            booking_service.db.db = previous
