from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ReviewBase(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewCreate(ReviewBase):
    salon: str
    booking: Optional[str] = Field(None, description="Completed booking the review is based on")


class ReviewReplyCreate(BaseModel):
    response: str = Field(..., min_length=1)


class ReviewReply(BaseModel):
    text: str
    respondedAt: datetime


class ReviewResponse(ReviewBase):
    id: str
    customer: str
    salon: str
    booking: Optional[str] = None
    isVerified: bool = False
    response: Optional[ReviewReply] = None
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True


class ReviewEnvelope(BaseModel):
    success: bool = True
    data: ReviewResponse


class ReviewListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[ReviewResponse]
