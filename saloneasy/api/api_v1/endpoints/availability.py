from fastapi import APIRouter, Query
from typing import Optional
from datetime import date
from saloneasy.schemas.availability import AvailableSlotsEnvelope
from saloneasy.services.availability_service import get_available_slots

router = APIRouter()

@router.get("", response_model=AvailableSlotsEnvelope)
@router.get("/slots", response_model=AvailableSlotsEnvelope)
async def get_salon_available_slots(
    salon_id: Optional[str] = Query(None, alias="salonId"),
    day: Optional[date] = Query(None, alias="date"),
    service_id: Optional[str] = Query(None, alias="serviceId")
):
    """
    Get the free time slots of a salon for one day

    - **salonId**: Salon to check
    - **date**: Day to check (YYYY-MM-DD)
    - **serviceId**: Optional service; its duration sets the slot length
    """
    slots = await get_available_slots(salon_id, day, service_id)
    return {"success": True, "data": slots}
