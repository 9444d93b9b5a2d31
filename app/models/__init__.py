# app/models/__init__.py
from .base import Base
from .professional import Professional
from .service import Service
from .availability import AvailabilityTemplate, Assignment, TimeOff
from .appointment import Appointment, ACTIVE_STATUSES

__all__ = [
    "Base",
    "Professional",
    "Service",
    "AvailabilityTemplate",
    "Assignment",
    "TimeOff",
    "Appointment",
    "ACTIVE_STATUSES",
]
