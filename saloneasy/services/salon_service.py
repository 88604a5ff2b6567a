from typing import Dict, Any, List, Optional
from saloneasy.core.errors import Forbidden, NotFound
from saloneasy.db.mongodb import db
from saloneasy.schemas.salon import SalonCreate, SalonUpdate, SalonStatus
from saloneasy.utils.mongo import parse_object_id, with_id
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

async def create_salon(salon_in: SalonCreate, owner_id: str) -> Dict[str, Any]:
    """
    Create a new salon owned by ``owner_id``
    """
    salon_data = salon_in.model_dump()
    salon_data["owner"] = owner_id
    salon_data["services"] = []
    salon_data["rating"] = 0
    salon_data["reviewCount"] = 0
    salon_data["isVerified"] = False
    salon_data["status"] = SalonStatus.PENDING.value
    salon_data["createdAt"] = datetime.utcnow()
    
    result = await db.db.salons.insert_one(salon_data)
    logger.info(f"Salon {result.inserted_id} created by owner {owner_id}")
    
    created_salon = await db.db.salons.find_one({"_id": result.inserted_id})
    return with_id(created_salon)

async def get_salon_by_id(salon_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a salon by ID, or None when the id is unknown or malformed
    """
    object_id = parse_object_id(salon_id)
    if object_id is None:
        return None
    salon = await db.db.salons.find_one({"_id": object_id})
    return with_id(salon)

async def get_salons(
    status: Optional[SalonStatus] = None,
    skip: int = 0,
    limit: int = 20
) -> List[Dict[str, Any]]:
    """
    List salons, optionally filtered by approval status
    """
    query = {}
    if status:
        query["status"] = SalonStatus(status).value
    
    cursor = db.db.salons.find(query, sort=[("createdAt", -1)], skip=skip, limit=limit)
    salons = await cursor.to_list(length=limit)
    return [with_id(salon) for salon in salons]

async def get_owner_salons(owner_id: str) -> List[Dict[str, Any]]:
    """
    Get all salons belonging to an owner
    """
    cursor = db.db.salons.find({"owner": owner_id}, sort=[("createdAt", -1)])
    salons = await cursor.to_list(length=None)
    return [with_id(salon) for salon in salons]

async def get_owned_salon(salon_id: str, owner_id: str) -> Dict[str, Any]:
    """
    Get a salon the requester owns.

    Unknown salons and salons of other owners look the same to the caller.
    """
    salon = await get_salon_by_id(salon_id)
    if not salon or salon["owner"] != owner_id:
        raise NotFound("Salon not found or not authorized")
    return salon

async def update_salon(salon_id: str, salon_update: SalonUpdate, owner_id: str) -> Dict[str, Any]:
    """
    Update a salon (owner only)
    """
    salon = await get_salon_by_id(salon_id)
    if not salon:
        raise NotFound("Salon not found")
    if salon["owner"] != owner_id:
        raise Forbidden("Not authorized to update this salon")
    
    # Update only provided fields
    update_data = salon_update.model_dump(exclude_unset=True)
    
    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.salons.update_one(
            {"_id": salon["_id"]},
            {"$set": update_data}
        )
    
    return await get_salon_by_id(salon_id)

async def add_service_to_salon(salon_id: str, service_id: str) -> None:
    """
    Record a service id on the salon's service list
    """
    await db.db.salons.update_one(
        {"_id": parse_object_id(salon_id)},
        {"$addToSet": {"services": service_id}}
    )
