from typing import Dict, Any, List
from saloneasy.core.errors import BadRequest, NotAuthorized, NotFound
from saloneasy.db.mongodb import db
from saloneasy.schemas.booking import BookingStatus
from saloneasy.schemas.notification import NotificationType
from saloneasy.schemas.payment import PaymentCreate, PaymentStatus
from saloneasy.services.booking_lifecycle import ensure_active
from saloneasy.services.booking_service import apply_booking_update, get_booking_by_id, set_booking_status
from saloneasy.services.notification_service import notify_users
from saloneasy.services.salon_service import get_salon_by_id
from saloneasy.utils.mongo import with_id
from datetime import datetime
from pymongo.errors import DuplicateKeyError
import logging
import uuid

logger = logging.getLogger(__name__)

def generate_payment_reference() -> str:
    return f"PAY-{uuid.uuid4().hex[:8].upper()}"

def generate_transaction_id() -> str:
    return f"TXN_{int(datetime.utcnow().timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"

async def record_payment(payment_in: PaymentCreate, customer_id: str) -> Dict[str, Any]:
    """
    Record a payment for the customer's booking and confirm it.

    No gateway is contacted: the payment is stored as completed with a
    generated transaction id, for the booking's total amount.
    """
    booking = await get_booking_by_id(payment_in.bookingId)
    if not booking:
        raise NotFound("Booking not found")

    if booking["customer"] != customer_id:
        raise NotAuthorized("Not authorized")

    ensure_active(booking["status"], "pay for")

    existing_payment = await db.db.payments.find_one({
        "booking": booking["id"],
        "status": PaymentStatus.COMPLETED.value,
    })
    if existing_payment:
        raise BadRequest("Booking is already paid")

    # Booking write first, conditional on the status checked above
    paid_at = datetime.utcnow()
    if booking["status"] == BookingStatus.PENDING.value:
        await set_booking_status(booking, BookingStatus.CONFIRMED, {"paidAt": paid_at})
    else:
        await apply_booking_update(booking, {"paidAt": paid_at, "updatedAt": paid_at})

    payment_data = {
        "paymentId": generate_payment_reference(),
        "booking": booking["id"],
        "customer": customer_id,
        "amount": booking["totalAmount"],
        "currency": payment_in.currency,
        "paymentMethod": payment_in.paymentMethod.value,
        "paymentGateway": payment_in.paymentGateway,
        "transactionId": generate_transaction_id(),
        "status": PaymentStatus.COMPLETED.value,
        "createdAt": paid_at,
    }

    try:
        result = await db.db.payments.insert_one(payment_data)
    except DuplicateKeyError:
        raise BadRequest("Booking is already paid")
    logger.info(f"Payment {payment_data['paymentId']} recorded for booking {booking['bookingId']}")

    salon = await get_salon_by_id(booking["salon"])
    await notify_users(
        [salon["owner"] if salon else None],
        NotificationType.PAYMENT_RECEIVED,
        "Payment received",
        f"Payment of {payment_data['amount']} {payment_data['currency']} received for booking {booking['bookingId']}.",
        {"bookingId": booking["id"], "paymentId": str(result.inserted_id)},
    )

    created_payment = await db.db.payments.find_one({"_id": result.inserted_id})
    return with_id(created_payment)

async def get_payment_history(customer_id: str) -> List[Dict[str, Any]]:
    """
    Payments made by a customer, newest first
    """
    cursor = db.db.payments.find({"customer": customer_id}, sort=[("createdAt", -1)])
    payments = await cursor.to_list(length=None)
    return [with_id(payment) for payment in payments]
