from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from saloneasy.core.auth import require_role
from saloneasy.core.errors import NotFound
from saloneasy.schemas.salon import (
    SalonCreate, SalonEnvelope, SalonListEnvelope, SalonStatus, SalonUpdate
)
from saloneasy.schemas.user import UserRole
from saloneasy.services.salon_service import (
    create_salon, get_owner_salons, get_salon_by_id, get_salons, update_salon
)

router = APIRouter()

@router.get("", response_model=SalonListEnvelope)
async def list_salons(
    status: Optional[SalonStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100)
):
    """
    List salons
    """
    salons = await get_salons(status=status, skip=skip, limit=limit)
    return {"success": True, "count": len(salons), "data": salons}

@router.get("/mine", response_model=SalonListEnvelope)
async def list_my_salons(current_user: dict = Depends(require_role(UserRole.SALON_OWNER))):
    """
    Salons owned by the current user
    """
    salons = await get_owner_salons(str(current_user["_id"]))
    return {"success": True, "count": len(salons), "data": salons}

@router.get("/{salon_id}", response_model=SalonEnvelope)
async def get_salon(salon_id: str):
    salon = await get_salon_by_id(salon_id)
    if not salon:
        raise NotFound("Salon not found")
    return {"success": True, "data": salon}

@router.post("", response_model=SalonEnvelope, status_code=status.HTTP_201_CREATED)
async def create_new_salon(
    salon_in: SalonCreate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    """
    Register a salon; the current user becomes its owner
    """
    salon = await create_salon(salon_in, str(current_user["_id"]))
    return {"success": True, "data": salon}

@router.put("/{salon_id}", response_model=SalonEnvelope)
async def update_salon_details(
    salon_id: str,
    salon_update: SalonUpdate,
    current_user: dict = Depends(require_role(UserRole.SALON_OWNER))
):
    salon = await update_salon(salon_id, salon_update, str(current_user["_id"]))
    return {"success": True, "data": salon}
