from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from saloneasy.core.errors import InvalidTimeSlot
from saloneasy.services.scheduling import normalize_time_label

class SalonStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class WorkingDay(BaseModel):
    open: Optional[str] = None
    close: Optional[str] = None
    isOpen: bool = True

    @field_validator("open", "close")
    @classmethod
    def check_time_label(cls, value: Optional[str]) -> Optional[str]:
        """Store hours as zero-padded HH:MM within the day."""
        if value is None:
            return value
        try:
            return normalize_time_label(value)
        except InvalidTimeSlot as exc:
            raise ValueError(exc.message)

def _closed_day() -> WorkingDay:
    return WorkingDay(isOpen=False)

class WorkingHours(BaseModel):
    monday: WorkingDay = Field(default_factory=WorkingDay)
    tuesday: WorkingDay = Field(default_factory=WorkingDay)
    wednesday: WorkingDay = Field(default_factory=WorkingDay)
    thursday: WorkingDay = Field(default_factory=WorkingDay)
    friday: WorkingDay = Field(default_factory=WorkingDay)
    saturday: WorkingDay = Field(default_factory=WorkingDay)
    sunday: WorkingDay = Field(default_factory=_closed_day)

class SalonCreate(BaseModel):
    name: str
    description: str
    address: str
    phone: str
    email: str
    images: List[str] = []
    workingHours: WorkingHours = Field(default_factory=WorkingHours)

class SalonUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    images: Optional[List[str]] = None
    workingHours: Optional[WorkingHours] = None

class SalonResponse(BaseModel):
    id: str
    name: str
    description: str
    address: str
    phone: str
    email: str
    images: List[str] = []
    workingHours: WorkingHours
    services: List[str] = []
    owner: str
    rating: float = 0
    reviewCount: int = 0
    isVerified: bool = False
    status: SalonStatus
    createdAt: datetime
    updatedAt: Optional[datetime] = None
    
    class Config:
        populate_by_name = True

class SalonEnvelope(BaseModel):
    success: bool = True
    data: SalonResponse

class SalonListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[SalonResponse]
