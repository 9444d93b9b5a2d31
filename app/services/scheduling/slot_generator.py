"""
Slot Generation Service

Generates bookable start instants for one calendar date, considering:
- Effective availability per professional (templates - time-off)
- Existing appointments with their own buffers
- Professional capacity
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.core.exceptions import InvalidInput
from app.schemas.scheduling import ProfessionalSlots
from app.services.scheduling import availability_resolver, queries
from app.services.scheduling.booking_profile import resolve_booking_profile
from app.services.scheduling.conflict_detector import has_capacity
from app.services.scheduling.timezone_calendar import local_minutes_to_utc_all, parse_iso_date

logger = logging.getLogger(__name__)


def _iso_utc(instant: datetime) -> str:
    return instant.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def candidate_starts(start_min: int, end_min: int, duration_min: int, step_min: int) -> List[int]:
    """Local minutes start, start+step, ... while the booking still fits in the window"""
    starts = []
    s = start_min
    while s + duration_min <= end_min:
        starts.append(s)
        s += step_min
    return starts


def generate_slots(
        db: Session,
        owner: str,
        date_iso: Union[date, str],
        professional_id: Optional[Union[str, UUID]] = None,
        service_id: Optional[Union[str, UUID]] = None,
        duration_min: Optional[int] = None,
        step_min: Optional[int] = None
) -> List[ProfessionalSlots]:
    """
    Bookable slots per eligible professional for `date_iso`.

    Returns:
        list[ProfessionalSlots]: one entry per eligible active professional,
        slots as sorted, de-duplicated ISO-8601 UTC strings. Professionals
        without any slot are listed with an empty list.
    """
    settings = get_settings()
    day = parse_iso_date(date_iso)
    step = settings.DEFAULT_STEP_MINUTES if step_min is None else step_min
    if step <= 0:
        raise InvalidInput("stepMin must be a positive number of minutes")

    profile = resolve_booking_profile(db, owner, service_id, duration_min)
    professionals = queries.find_eligible_professionals(
        db, owner, professional_id=professional_id, required_skills=profile.required_skills
    )

    results: List[ProfessionalSlots] = []

    for professional in professionals:
        windows = availability_resolver.resolve(db, owner, professional.id, day)

        candidates = set()
        for window in windows:
            for s in candidate_starts(window.start_min, window.end_min, profile.duration_min, step):
                candidates.update(local_minutes_to_utc_all(day, window.timezone, s))

        slots: List[str] = []
        if candidates:
            duration = timedelta(minutes=profile.duration_min)
            existing = queries.find_active_appointments(
                db, owner, professional.id, min(candidates), max(candidates) + duration
            )
            for start in sorted(candidates):
                if has_capacity(
                        existing,
                        start,
                        start + duration,
                        profile.buffer_before_min,
                        profile.buffer_after_min,
                        professional.capacity,
                ):
                    slots.append(_iso_utc(start))

        logger.debug(f"{len(slots)} slots for professional {professional.id} on {day}")
        results.append(ProfessionalSlots(
            professional_id=str(professional.id),
            professional_name=professional.name,
            slots=slots,
        ))

    return results
