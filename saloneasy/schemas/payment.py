from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum

class PaymentMethod(str, Enum):
    CARD = "card"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

class PaymentCreate(BaseModel):
    bookingId: str
    paymentMethod: PaymentMethod
    paymentGateway: str = "manual"
    currency: str = "USD"

class PaymentResponse(BaseModel):
    id: str
    paymentId: str
    booking: str
    customer: str
    amount: float
    currency: str
    paymentMethod: PaymentMethod
    paymentGateway: str
    transactionId: str
    status: PaymentStatus
    createdAt: datetime
    
    class Config:
        populate_by_name = True

class PaymentEnvelope(BaseModel):
    success: bool = True
    data: PaymentResponse

class PaymentListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[PaymentResponse]
