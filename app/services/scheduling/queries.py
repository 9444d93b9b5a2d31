# ============================================================================
# app/services/scheduling/queries.py
# Store reads used by the scheduling engine - every query is owner-scoped
# ============================================================================
import functools
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.core.exceptions import InvalidInput, NotFound, StoreUnavailable
from app.models import (
    ACTIVE_STATUSES,
    Appointment,
    Assignment,
    AvailabilityTemplate,
    Professional,
    Service,
    TimeOff,
)

logger = logging.getLogger(__name__)

_STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def store_call(func):
    """Translate connectivity failures of the underlying store to StoreUnavailable"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except _STORE_ERRORS as e:
            logger.error(f"Store failure in {func.__name__}: {e}")
            raise StoreUnavailable("Scheduling store is unavailable") from e
    return wrapper


def as_uuid(value: Union[str, UUID], field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidInput(f"Invalid {field}: {value!r}")


@store_call
def get_service(db: Session, owner: str, service_id: Union[str, UUID]) -> Service:
    """Active service of this owner, or NotFound"""
    service = db.query(Service).filter(
        Service.id == as_uuid(service_id, "serviceId"),
        Service.owner == owner,
        Service.active.is_(True),
    ).first()

    if not service:
        raise NotFound("Service not found or inactive")
    return service


@store_call
def get_professional(
        db: Session,
        owner: str,
        professional_id: Union[str, UUID],
        for_update: bool = False
) -> Professional:
    """Professional of this owner, or NotFound. `for_update` takes a row lock."""
    query = db.query(Professional).filter(
        Professional.id == as_uuid(professional_id, "professionalId"),
        Professional.owner == owner,
    )
    if for_update:
        query = query.with_for_update()

    professional = query.first()
    if not professional:
        raise NotFound("Professional not found")
    return professional


@store_call
def find_eligible_professionals(
        db: Session,
        owner: str,
        professional_id: Optional[Union[str, UUID]] = None,
        required_skills: Sequence[str] = ()
) -> List[Professional]:
    """Active professionals of the owner holding every required skill"""
    query = db.query(Professional).filter(
        Professional.owner == owner,
        Professional.active.is_(True),
    )
    if professional_id:
        query = query.filter(Professional.id == as_uuid(professional_id, "professionalId"))

    professionals = query.order_by(Professional.name.asc()).all()
    # skills live in a JSON column, matched here to stay backend-agnostic
    return [p for p in professionals if p.has_skills(required_skills)]


@store_call
def find_assignments_covering(
        db: Session,
        owner: str,
        professional_id: UUID,
        day: date
) -> List[Assignment]:
    """Assignments of the professional whose inclusive date range covers `day`"""
    return db.query(Assignment).join(
        AvailabilityTemplate, Assignment.template_id == AvailabilityTemplate.id
    ).filter(
        Assignment.owner == owner,
        AvailabilityTemplate.owner == owner,
        Assignment.professional_id == professional_id,
        Assignment.start_date <= day,
        or_(Assignment.end_date.is_(None), Assignment.end_date >= day),
    ).order_by(Assignment.start_date.asc()).all()


@store_call
def find_time_off(
        db: Session,
        owner: str,
        professional_id: UUID,
        day: date
) -> List[TimeOff]:
    """Business-wide and professional-scoped exceptions on a local date"""
    return db.query(TimeOff).filter(
        TimeOff.owner == owner,
        TimeOff.date == day,
        or_(TimeOff.professional_id.is_(None), TimeOff.professional_id == professional_id),
    ).all()


@store_call
def find_active_appointments(
        db: Session,
        owner: str,
        professional_id: UUID,
        range_start: datetime,
        range_end: datetime,
        exclude_id: Optional[UUID] = None
) -> List[Appointment]:
    """
    Confirmed/pending appointments of the professional that may touch
    [range_start, range_end).

    The lower bound is widened by CONFLICT_LOOKAROUND_HOURS so that bookings
    starting the previous day, whose duration or buffers spill over, are
    still seen by the conflict check.
    """
    settings = get_settings()
    lookaround = timedelta(hours=settings.CONFLICT_LOOKAROUND_HOURS)

    query = db.query(Appointment).filter(
        Appointment.owner == owner,
        Appointment.professional_id == professional_id,
        Appointment.status.in_(ACTIVE_STATUSES),
        Appointment.start >= range_start - lookaround,
        Appointment.start < range_end + lookaround,
    )
    if exclude_id is not None:
        query = query.filter(Appointment.id != exclude_id)

    return query.order_by(Appointment.start.asc()).all()


@store_call
def find_by_idempotency_key(db: Session, owner: str, idempotency_key: str) -> Optional[Appointment]:
    return db.query(Appointment).filter(
        Appointment.owner == owner,
        Appointment.idempotency_key == idempotency_key,
    ).first()


@store_call
def get_appointment(db: Session, owner: str, appointment_id: Union[str, UUID]) -> Appointment:
    appointment = db.query(Appointment).filter(
        Appointment.id == as_uuid(appointment_id, "appointmentId"),
        Appointment.owner == owner,
    ).first()

    if not appointment:
        raise NotFound("Appointment not found")
    return appointment


@store_call
def list_appointments_between(
        db: Session,
        owner: str,
        range_start: datetime,
        range_end: datetime,
        professional_id: Optional[Union[str, UUID]] = None
) -> List[Appointment]:
    """All appointments (any status) starting in [range_start, range_end)"""
    query = db.query(Appointment).filter(
        Appointment.owner == owner,
        Appointment.start >= range_start,
        Appointment.start < range_end,
    )
    if professional_id:
        query = query.filter(Appointment.professional_id == as_uuid(professional_id, "professionalId"))

    return query.order_by(Appointment.start.asc()).all()
