from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from saloneasy.core.auth import require_role
from saloneasy.core.errors import NotFound
from saloneasy.schemas.service import (
    ServiceCreate, ServiceEnvelope, ServiceListEnvelope, ServiceUpdate
)
from saloneasy.schemas.user import UserRole
from saloneasy.services.catalog_service import (
    create_service, get_service_by_id, get_services, update_service
)

router = APIRouter()

@router.get("", response_model=ServiceListEnvelope)
async def list_services(
    salon_id: Optional[str] = Query(None, alias="salonId"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100)
):
    """
    List services, optionally for one salon
    """
    services = await get_services(
        salon_id=salon_id,
        include_inactive=include_inactive,
        skip=skip,
        limit=limit
    )
    return {"success": True, "count": len(services), "data": services}

@router.get("/{service_id}", response_model=ServiceEnvelope)
async def get_service(service_id: str):
    service = await get_service_by_id(service_id)
    if not service:
        raise NotFound("Service not found")
    return {"success": True, "data": service}

@router.post("", response_model=ServiceEnvelope, status_code=status.HTTP_201_CREATED)
async def create_new_service(
    service_in: ServiceCreate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    """
    Add a service to one of the current owner's salons
    """
    service = await create_service(service_in, str(current_user["_id"]))
    return {"success": True, "data": service}

@router.put("/{service_id}", response_model=ServiceEnvelope)
async def update_service_details(
    service_id: str,
    service_update: ServiceUpdate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    service = await update_service(service_id, service_update, str(current_user["_id"]))
    return {"success": True, "data": service}
