from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    CUSTOMER = "customer"
    SALON_OWNER = "salon_owner"
    ADMIN = "admin"

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    isVerified: bool = True
    createdAt: Optional[datetime] = None
    
    class Config:
        populate_by_name = True
