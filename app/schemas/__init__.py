# app/schemas/__init__.py
from .scheduling import (
    AvailabilityWindow,
    AppointmentCreateRequest,
    RescheduleRequest,
    CancelRequest,
    ProfessionalSlots,
    AppointmentResponse
)

__all__ = [
    "AvailabilityWindow",
    "AppointmentCreateRequest",
    "RescheduleRequest",
    "CancelRequest",
    "ProfessionalSlots",
    "AppointmentResponse",
]
