"""Effective duration, buffers and skills of a booking request"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInput
from app.models import Service
from app.services.scheduling import queries

MIN_DURATION_MINUTES = 5


@dataclass(frozen=True)
class BookingProfile:
    duration_min: int
    buffer_before_min: int = 0
    buffer_after_min: int = 0
    required_skills: Tuple[str, ...] = ()
    service: Optional[Service] = None


def resolve_booking_profile(
        db: Session,
        owner: str,
        service_id: Optional[Union[str, UUID]] = None,
        duration_min: Optional[int] = None
) -> BookingProfile:
    """
    A service defines duration and buffers; an explicit duration is only
    accepted when no service is given, and then carries no buffers.
    """
    if service_id and duration_min is not None:
        raise InvalidInput("Provide either serviceId or durationMin, not both")

    if service_id:
        service = queries.get_service(db, owner, service_id)
        return BookingProfile(
            duration_min=service.duration_min,
            buffer_before_min=service.buffer_before_min or 0,
            buffer_after_min=service.buffer_after_min or 0,
            required_skills=tuple(service.required_skills or ()),
            service=service,
        )

    if duration_min is None:
        raise InvalidInput("Provide serviceId or durationMin")
    if duration_min < MIN_DURATION_MINUTES:
        raise InvalidInput(f"durationMin must be at least {MIN_DURATION_MINUTES}")

    return BookingProfile(duration_min=duration_min)
