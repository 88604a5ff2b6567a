from fastapi import APIRouter, Depends, status
from saloneasy.core.auth import require_role
from saloneasy.schemas.payment import PaymentCreate, PaymentEnvelope, PaymentListEnvelope
from saloneasy.schemas.user import UserRole
from saloneasy.services.payment_service import get_payment_history, record_payment

router = APIRouter()

@router.post("", response_model=PaymentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_in: PaymentCreate,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER))
):
    """
    Record a payment for one of the customer's bookings

    A pending booking becomes confirmed.
    """
    payment = await record_payment(payment_in, str(current_user["_id"]))
    return {"success": True, "data": payment}

@router.get("/history", response_model=PaymentListEnvelope)
async def payment_history(current_user: dict = Depends(require_role(UserRole.CUSTOMER))):
    payments = await get_payment_history(str(current_user["_id"]))
    return {"success": True, "count": len(payments), "data": payments}
