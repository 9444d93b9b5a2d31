"""
Availability Resolver

Effective availability of one professional on one local date:
template windows of every covering assignment minus time-off.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.services.scheduling import queries
from app.services.scheduling.intervals import Interval, merge, subtract
from app.services.scheduling.timezone_calendar import day_range_utc, parse_iso_date, resolve_zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedWindow:
    """A bookable local minute range, tied to the timezone of its template"""
    start_min: int
    end_min: int
    timezone: str
    template_id: UUID


def resolve(
        db: Session,
        owner: str,
        professional_id: Union[str, UUID],
        date_local: Union[date, str]
) -> List[ResolvedWindow]:
    """
    Surviving availability windows for `professional_id` on `date_local`.

    Each assignment is resolved on its own: its template may use a different
    timezone, so the local weekday is computed per template.

    Returns:
        list[ResolvedWindow], empty when nothing is assigned or everything
        is consumed by time-off.
    """
    settings = get_settings()
    day = parse_iso_date(date_local)
    professional_id = queries.as_uuid(professional_id, "professionalId")

    assignments = queries.find_assignments_covering(db, owner, professional_id, day)
    if not assignments:
        logger.debug(f"No assignment covers {day} for professional {professional_id}")
        return []

    time_off = None
    resolved: List[ResolvedWindow] = []

    for assignment in assignments:
        template = assignment.template
        zone = resolve_zone(template.timezone, fallback=settings.DEFAULT_TIMEZONE)
        weekday = day_range_utc(day, zone).weekday

        windows = [Interval(start, end) for start, end in template.windows_for_weekday(weekday)]
        if not windows:
            continue

        # Same owner, same local date, same professional for every template
        if time_off is None:
            time_off = queries.find_time_off(db, owner, professional_id, day)
        cuts = merge(Interval(*t.minute_range) for t in time_off)

        surviving = subtract(windows, cuts, min_width=settings.MIN_SLOT_WIDTH_MINUTES)
        resolved.extend(
            ResolvedWindow(
                start_min=w.start,
                end_min=w.end,
                timezone=zone.zone,
                template_id=template.id,
            )
            for w in surviving
        )

    return resolved
