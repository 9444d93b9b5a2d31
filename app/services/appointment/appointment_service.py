# ============================================================================
# app/services/appointment/appointment_service.py
# ============================================================================
"""
Service for placing, cancelling and rescheduling appointments.

A booking request goes proposed -> confirmed | rejected. The capacity check
from slot listing is re-run here against the store's current state, inside
the booking lock, and verified once more after the insert.
"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInput, ScheduleConflict, StoreUnavailable
from app.models.appointment import Appointment
from app.schemas.scheduling import AppointmentCreateRequest
from app.services.appointment.booking_lock import booking_lock, uses_row_lock
from app.services.scheduling import queries
from app.services.scheduling.booking_profile import resolve_booking_profile
from app.services.scheduling.conflict_detector import check_capacity
from app.services.scheduling.timezone_calendar import day_range_utc, ensure_utc, parse_iso_date

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class AppointmentService:
    """Handles appointment write operations"""

    @staticmethod
    def create_appointment(
            db: Session,
            owner: str,
            request: AppointmentCreateRequest,
            exclude_id: Optional[UUID] = None,
            commit: bool = True
    ) -> Appointment:
        """
        Create a confirmed appointment or raise ScheduleConflict.

        Args:
            db: Database session
            owner: tenant placing the booking
            request: validated booking payload
            exclude_id: appointment ignored by the conflict check (reschedule)
            commit: commit the transaction (False when part of a larger unit)

        Returns:
            The persisted Appointment
        """
        if request.idempotency_key:
            replay = queries.find_by_idempotency_key(db, owner, request.idempotency_key)
            if replay:
                logger.info(f"Idempotent replay of {request.idempotency_key}, returning {replay.id}")
                return replay

        profile = resolve_booking_profile(db, owner, request.service_id, request.duration_min)
        start = ensure_utc(request.start)
        end = start + timedelta(minutes=profile.duration_min)
        professional_id = queries.as_uuid(request.professional_id, "professionalId")

        logger.info(
            f"Booking {BookingState.PROPOSED.value}",
            extra={"owner": owner, "professional_id": str(professional_id), "start": start.isoformat()}
        )

        with booking_lock(owner, professional_id, start.date()):
            professional = queries.get_professional(
                db, owner, professional_id, for_update=uses_row_lock()
            )
            if not professional.active:
                raise InvalidInput("Professional is inactive")
            if not professional.has_skills(profile.required_skills):
                raise InvalidInput("Professional lacks the skills required by this service")

            range_start = start - timedelta(minutes=profile.buffer_before_min)
            range_end = end + timedelta(minutes=profile.buffer_after_min)

            existing = queries.find_active_appointments(
                db, owner, professional_id, range_start, range_end, exclude_id=exclude_id
            )
            check = check_capacity(
                existing, start, end,
                profile.buffer_before_min, profile.buffer_after_min,
                professional.capacity,
            )
            if not check.has_capacity:
                AppointmentService._reject(db, owner, professional_id, start, check.capacity_used)

            appointment = Appointment(
                owner=owner,
                client_id=request.client_id,
                client_name=request.client_name,
                professional_id=professional_id,
                service_id=profile.service.id if profile.service else None,
                start=start,
                duration_min=profile.duration_min,
                buffer_before_min=profile.buffer_before_min,
                buffer_after_min=profile.buffer_after_min,
                status=BookingState.CONFIRMED.value,
                created_by=request.created_by,
                idempotency_key=request.idempotency_key,
            )

            try:
                db.add(appointment)
                db.flush()

                # Insert-then-verify: a booking committed by another writer
                # between the read above and our insert shows up here.
                others = [
                    a for a in queries.find_active_appointments(
                        db, owner, professional_id, range_start, range_end, exclude_id=exclude_id
                    )
                    if a.id != appointment.id
                ]
                verify = check_capacity(
                    others, start, end,
                    profile.buffer_before_min, profile.buffer_after_min,
                    professional.capacity,
                )
                if not verify.has_capacity:
                    logger.warning(f"Post-insert verification failed for {appointment.id}, rolling back")
                    AppointmentService._reject(db, owner, professional_id, start, verify.capacity_used)

                if commit:
                    db.commit()
                    db.refresh(appointment)
            except IntegrityError:
                db.rollback()
                if request.idempotency_key:
                    replay = queries.find_by_idempotency_key(db, owner, request.idempotency_key)
                    if replay:
                        return replay
                raise
            except OperationalError as e:
                db.rollback()
                raise StoreUnavailable("Could not persist appointment") from e

        logger.info(
            f"Booking {BookingState.CONFIRMED.value}",
            extra={"owner": owner, "appointment_id": str(appointment.id)}
        )
        return appointment

    @staticmethod
    def _reject(db: Session, owner: str, professional_id: UUID, start: datetime, used: int):
        db.rollback()
        logger.info(
            f"Booking {BookingState.REJECTED.value}: capacity exceeded",
            extra={"owner": owner, "professional_id": str(professional_id),
                   "start": start.isoformat(), "overlapping": used}
        )
        raise ScheduleConflict("Schedule conflict for this time")

    @staticmethod
    def cancel_appointment(
            db: Session,
            owner: str,
            appointment_id: Union[str, UUID],
            reason: Optional[str] = None,
            commit: bool = True
    ) -> Appointment:
        """Status transition to cancelled; appointments are never deleted"""
        appointment = queries.get_appointment(db, owner, appointment_id)
        if appointment.status == "cancelled":
            return appointment

        appointment.status = "cancelled"
        appointment.cancelled_at = datetime.now(timezone.utc)
        appointment.cancellation_reason = reason

        if commit:
            db.commit()
            db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} cancelled")
        return appointment

    @staticmethod
    def reschedule_appointment(
            db: Session,
            owner: str,
            appointment_id: Union[str, UUID],
            new_start: datetime,
            service_id: Optional[Union[str, UUID]] = None,
            duration_min: Optional[int] = None,
            idempotency_key: Optional[str] = None
    ) -> Appointment:
        """
        Cancel-old + create-new in one transaction.

        The old booking is excluded from the conflict check so an appointment
        can move within its own effective range.
        """
        old = queries.get_appointment(db, owner, appointment_id)
        if not old.is_active:
            raise InvalidInput("Only confirmed or pending appointments can be rescheduled")

        if service_id is None and duration_min is None:
            if old.service_id:
                service_id = old.service_id
            else:
                duration_min = old.duration_min

        request = AppointmentCreateRequest(
            client_id=old.client_id,
            client_name=old.client_name,
            start=ensure_utc(new_start),
            professional_id=old.professional_id,
            service_id=service_id,
            duration_min=duration_min,
            created_by=old.created_by,
            idempotency_key=idempotency_key,
        )

        new = AppointmentService.create_appointment(
            db, owner, request, exclude_id=old.id, commit=False
        )
        AppointmentService.cancel_appointment(
            db, owner, old.id, reason=f"Rescheduled to {new.id}", commit=False
        )

        try:
            db.commit()
        except OperationalError as e:
            db.rollback()
            raise StoreUnavailable("Could not persist reschedule") from e

        db.refresh(new)
        return new

    @staticmethod
    def list_appointments(
            db: Session,
            owner: str,
            date_iso: str,
            professional_id: Optional[Union[str, UUID]] = None
    ) -> List[Appointment]:
        """Appointments (any status) starting on the given UTC day"""
        day = parse_iso_date(date_iso)
        day_range = day_range_utc(day, "UTC")
        return queries.list_appointments_between(
            db, owner, day_range.start_utc, day_range.end_utc, professional_id=professional_id
        )
