from datetime import datetime
from typing import Dict, Any, List, Optional
from pymongo.errors import DuplicateKeyError

from saloneasy.core.errors import BadRequest, Forbidden, NotFound
from saloneasy.db.mongodb import db
from saloneasy.schemas.booking import BookingStatus
from saloneasy.schemas.notification import NotificationType
from saloneasy.schemas.review import ReviewCreate
from saloneasy.services.booking_service import get_booking_by_id
from saloneasy.services.notification_service import notify_users
from saloneasy.services.salon_service import get_salon_by_id
from saloneasy.utils.mongo import parse_object_id, with_id
import logging

logger = logging.getLogger(__name__)

async def create_review(review_in: ReviewCreate, customer_id: str) -> Dict[str, Any]:
    """
    Create a review of a salon.

    A customer reviews each salon at most once. When a booking is given it
    must be the customer's completed booking at that salon, and the review
    is marked verified.
    """
    salon = await get_salon_by_id(review_in.salon)
    if not salon:
        raise NotFound("Salon not found")

    existing_review = await db.db.reviews.find_one({"customer": customer_id, "salon": salon["id"]})
    if existing_review:
        raise BadRequest("You have already reviewed this salon")

    if review_in.booking:
        booking = await get_booking_by_id(review_in.booking)
        if (
            not booking
            or booking["customer"] != customer_id
            or booking["salon"] != salon["id"]
            or booking["status"] != BookingStatus.COMPLETED.value
        ):
            raise BadRequest("Invalid booking or booking not completed")

    review_data = review_in.model_dump()
    review_data["salon"] = salon["id"]
    review_data["customer"] = customer_id
    review_data["isVerified"] = bool(review_in.booking)
    review_data["response"] = None
    review_data["createdAt"] = datetime.utcnow()

    try:
        result = await db.db.reviews.insert_one(review_data)
    except DuplicateKeyError:
        raise BadRequest("You have already reviewed this salon")

    logger.info(f"Review {result.inserted_id} of salon {salon['id']} by customer {customer_id}")

    # Update salon's average rating
    await update_salon_rating(salon["id"])

    await notify_users(
        [salon["owner"]],
        NotificationType.REVIEW_RECEIVED,
        "New review",
        f"{salon['name']} received a {review_in.rating}-star review.",
        {"reviewId": str(result.inserted_id)},
    )

    review = await db.db.reviews.find_one({"_id": result.inserted_id})
    return with_id(review)

async def get_review_by_id(review_id: str) -> Optional[Dict[str, Any]]:
    object_id = parse_object_id(review_id)
    if object_id is None:
        return None
    review = await db.db.reviews.find_one({"_id": object_id})
    return with_id(review)

async def get_salon_reviews(
    salon_id: str,
    rating: Optional[int] = None,
    skip: int = 0,
    limit: int = 10
) -> List[Dict[str, Any]]:
    """
    Get reviews of a salon, newest first
    """
    query = {"salon": salon_id}
    if rating:
        query["rating"] = rating

    cursor = db.db.reviews.find(query, sort=[("createdAt", -1)], skip=skip, limit=limit)
    reviews = await cursor.to_list(length=limit)
    return [with_id(review) for review in reviews]

async def get_customer_reviews(customer_id: str) -> List[Dict[str, Any]]:
    cursor = db.db.reviews.find({"customer": customer_id}, sort=[("createdAt", -1)])
    reviews = await cursor.to_list(length=None)
    return [with_id(review) for review in reviews]

async def respond_to_review(review_id: str, owner_id: str, text: str) -> Dict[str, Any]:
    """
    Attach the salon owner's reply to a review
    """
    review = await get_review_by_id(review_id)
    if not review:
        raise NotFound("Review not found")

    salon = await get_salon_by_id(review["salon"])
    if not salon or salon["owner"] != owner_id:
        raise Forbidden("Not authorized to respond to this review")

    now = datetime.utcnow()
    await db.db.reviews.update_one(
        {"_id": review["_id"]},
        {"$set": {"response": {"text": text, "respondedAt": now}, "updatedAt": now}}
    )
    return await get_review_by_id(review_id)

async def delete_review(review_id: str, user_id: str, is_admin: bool = False) -> None:
    """
    Delete a review (its author or an admin) and refresh the salon rating
    """
    review = await get_review_by_id(review_id)
    if not review:
        raise NotFound("Review not found")

    if review["customer"] != user_id and not is_admin:
        raise Forbidden("You can only delete your own reviews")

    await db.db.reviews.delete_one({"_id": review["_id"]})
    logger.info(f"Review {review_id} deleted by {user_id}")

    await update_salon_rating(review["salon"])

async def update_salon_rating(salon_id: str) -> None:
    """
    Calculate and store the average rating and review count of a salon
    """
    pipeline = [
        {"$match": {"salon": salon_id}},
        {"$group": {"_id": None, "avgRating": {"$avg": "$rating"}, "count": {"$sum": 1}}},
    ]
    agg = await db.db.reviews.aggregate(pipeline).to_list(length=1)

    average_rating = 0.0
    count = 0
    if agg:
        count = int(agg[0].get("count", 0) or 0)
        average_rating = round(float(agg[0].get("avgRating") or 0.0), 1) if count else 0.0

    await db.db.salons.update_one(
        {"_id": parse_object_id(salon_id)},
        {"$set": {"rating": average_rating, "reviewCount": count}}
    )
