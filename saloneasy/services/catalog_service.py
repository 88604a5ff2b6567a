from typing import Dict, Any, List, Optional
from saloneasy.core.errors import Forbidden, NotFound
from saloneasy.db.mongodb import db
from saloneasy.schemas.service import ServiceCreate, ServiceUpdate
from saloneasy.services.salon_service import add_service_to_salon, get_owned_salon, get_salon_by_id
from saloneasy.utils.mongo import parse_object_id, with_id
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

async def create_service(service_in: ServiceCreate, owner_id: str) -> Dict[str, Any]:
    """
    Add a service to a salon the requester owns
    """
    salon = await get_owned_salon(service_in.salon, owner_id)
    
    service_data = service_in.model_dump()
    service_data["salon"] = salon["id"]
    service_data["createdAt"] = datetime.utcnow()
    
    result = await db.db.services.insert_one(service_data)
    await add_service_to_salon(salon["id"], str(result.inserted_id))
    logger.info(f"Service {result.inserted_id} added to salon {salon['id']}")
    
    created_service = await db.db.services.find_one({"_id": result.inserted_id})
    return with_id(created_service)

async def get_service_by_id(service_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a service by ID
    """
    object_id = parse_object_id(service_id)
    if object_id is None:
        return None
    service = await db.db.services.find_one({"_id": object_id})
    return with_id(service)

async def get_services(
    salon_id: Optional[str] = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 50
) -> List[Dict[str, Any]]:
    """
    List services, optionally for one salon
    """
    query = {}
    if salon_id:
        query["salon"] = salon_id
    if not include_inactive:
        query["isActive"] = True
    
    cursor = db.db.services.find(query, sort=[("name", 1)], skip=skip, limit=limit)
    services = await cursor.to_list(length=limit)
    return [with_id(service) for service in services]

async def update_service(service_id: str, service_update: ServiceUpdate, owner_id: str) -> Dict[str, Any]:
    """
    Update a service (owner of its salon only)
    """
    service = await get_service_by_id(service_id)
    if not service:
        raise NotFound("Service not found")
    
    salon = await get_salon_by_id(service["salon"])
    if not salon or salon["owner"] != owner_id:
        raise Forbidden("Not authorized to update this service")
    
    update_data = service_update.model_dump(exclude_unset=True)
    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.services.update_one(
            {"_id": service["_id"]},
            {"$set": update_data}
        )
    
    return await get_service_by_id(service_id)
