from datetime import date
from typing import List, Optional
import logging

from saloneasy.core.config import settings
from saloneasy.core.errors import BadRequest, NotFound
from saloneasy.services.booking_service import get_occupied_times
from saloneasy.services.catalog_service import get_service_by_id
from saloneasy.services.salon_service import get_salon_by_id
from saloneasy.services.scheduling import filter_available, generate_time_slots, working_day_for

logger = logging.getLogger(__name__)

async def get_available_slots(
    salon_id: Optional[str],
    day: Optional[date],
    service_id: Optional[str] = None
) -> List[str]:
    """
    Free slot labels of a salon for one day.

    Slots step by the requested service's duration, or by the configured
    default when no service is given. A closed day yields an empty list
    without looking at bookings.
    """
    if not salon_id or day is None:
        raise BadRequest("Salon ID and date are required")

    salon = await get_salon_by_id(salon_id)
    if not salon:
        raise NotFound("Salon not found")

    working_day = working_day_for(salon.get("workingHours"), day)
    if working_day is None:
        logger.debug(f"Salon {salon_id} is closed on {day}")
        return []

    granularity = settings.SLOT_GRANULARITY_MINUTES
    if service_id:
        service = await get_service_by_id(service_id)
        if not service or service["salon"] != salon["id"]:
            raise NotFound("Service not found")
        granularity = service["duration"]

    candidates = generate_time_slots(working_day["open"], working_day["close"], granularity)
    occupied = await get_occupied_times(salon["id"], day)
    return filter_available(candidates, occupied)
