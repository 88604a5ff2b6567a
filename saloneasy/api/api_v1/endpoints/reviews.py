from fastapi import APIRouter, Depends, Query, Response, status
from typing import Optional
from saloneasy.core.auth import get_current_user, require_role
from saloneasy.schemas.review import ReviewCreate, ReviewEnvelope, ReviewListEnvelope, ReviewReplyCreate
from saloneasy.schemas.user import UserRole
from saloneasy.services.review_service import (
    create_review, delete_review, get_customer_reviews, get_salon_reviews, respond_to_review
)

router = APIRouter()

@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def add_review(
    review_in: ReviewCreate,
    current_user: dict = Depends(require_role(UserRole.CUSTOMER))
):
    """
    Review a salon as the current customer

    - **booking**: Optional completed booking; marks the review verified
    """
    review = await create_review(review_in, str(current_user["_id"]))
    return {"success": True, "data": review}

@router.get("/salon/{salon_id}", response_model=ReviewListEnvelope)
async def get_reviews_for_salon(
    salon_id: str,
    rating: Optional[int] = Query(None, ge=1, le=5),
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100)
):
    """
    Get reviews of a salon, optionally filtered by star rating
    """
    reviews = await get_salon_reviews(salon_id, rating=rating, skip=skip, limit=limit)
    return {"success": True, "count": len(reviews), "data": reviews}

@router.get("/mine", response_model=ReviewListEnvelope)
async def get_my_reviews(current_user: dict = Depends(require_role(UserRole.CUSTOMER))):
    reviews = await get_customer_reviews(str(current_user["_id"]))
    return {"success": True, "count": len(reviews), "data": reviews}

@router.put("/{review_id}/response", response_model=ReviewEnvelope)
async def reply_to_review(
    review_id: str,
    reply_in: ReviewReplyCreate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    """
    Reply to a review of one of the current owner's salons
    """
    review = await respond_to_review(review_id, str(current_user["_id"]), reply_in.response)
    return {"success": True, "data": review}

@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def remove_review(review_id: str, current_user: dict = Depends(get_current_user)):
    """
    Delete a review. Only the customer who wrote it or an admin can delete it.
    """
    await delete_review(
        review_id,
        str(current_user["_id"]),
        is_admin=current_user.get("role") == UserRole.ADMIN
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
