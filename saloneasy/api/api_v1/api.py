from fastapi import APIRouter
from saloneasy.api.api_v1.endpoints import (
    appointments, availability, bookings, notifications, payments,
    reviews, salon_owner, salons, services
)

router = APIRouter()

# Include all routers
router.include_router(salons.router, prefix="/salons", tags=["Salons"])
router.include_router(services.router, prefix="/services", tags=["Services"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
router.include_router(salon_owner.router, prefix="/salon-owner", tags=["Salon Owner"])
router.include_router(payments.router, prefix="/payments", tags=["Payments"])
router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
