from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class ServiceCreate(BaseModel):
    salon: str
    name: str
    description: str
    price: float = Field(..., ge=0)
    duration: int = Field(..., gt=0)  # Duration in minutes
    category: str  # e.g., 'Hair', 'Makeup', 'Nails'
    isActive: bool = True

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0)
    category: Optional[str] = None
    isActive: Optional[bool] = None

class ServiceResponse(BaseModel):
    id: str
    salon: str
    name: str
    description: str
    price: float
    duration: int
    category: str
    isActive: bool
    createdAt: datetime
    updatedAt: Optional[datetime] = None
    
    class Config:
        populate_by_name = True

class ServiceEnvelope(BaseModel):
    success: bool = True
    data: ServiceResponse

class ServiceListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[ServiceResponse]
