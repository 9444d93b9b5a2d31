"""
API v1 router setup
All booking routes require a tenant JWT bearer token
"""
from fastapi import APIRouter

from app.api.v1.booking import appointments, slots

api_v1_router = APIRouter()

# ============================================================================
# BOOKING ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    slots.router,
    tags=["Booking"]
)

api_v1_router.include_router(
    appointments.router,
    tags=["Booking"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": "JWT Bearer token required; the `sub` claim is the owner",
        "endpoints": {
            "slots": "GET /api/v1/slots?date&serviceId|durationMin&professionalId&stepMin",
            "appointments": "POST|GET /api/v1/appointments",
            "cancel": "POST /api/v1/appointments/{id}/cancel",
            "reschedule": "POST /api/v1/appointments/{id}/reschedule",
        }
    }
