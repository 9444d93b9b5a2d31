# ============================================================================
# app/api/v1/booking/appointments.py
# Booking endpoints - thin HTTP layer over AppointmentService
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import get_current_owner
from app.schemas.scheduling import (
    AppointmentCreateRequest,
    AppointmentResponse,
    CancelRequest,
    RescheduleRequest,
)
from app.services.appointment.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["booking-appointments"])


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
        payload: AppointmentCreateRequest,
        owner: str = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """
    Book an appointment. Capacity is re-checked against current bookings;
    409 means the instant was taken and slots should be listed again.
    """
    return AppointmentService.create_appointment(db, owner, payload)


@router.get("", response_model=List[AppointmentResponse])
def list_appointments(
        day: date = Query(..., alias="date", description="UTC day (YYYY-MM-DD)"),
        professional_id: Optional[UUID] = Query(None, alias="professionalId"),
        owner: str = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """All appointments starting on the given UTC day, including cancelled ones"""
    return AppointmentService.list_appointments(db, owner, day, professional_id=professional_id)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        payload: Optional[CancelRequest] = None,
        owner: str = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """Mark an appointment cancelled. It stays in the timeline for auditing."""
    reason = payload.reason if payload else None
    return AppointmentService.cancel_appointment(db, owner, appointment_id, reason=reason)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
def reschedule_appointment(
        payload: RescheduleRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        owner: str = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """Cancel the old appointment and book the new instant in one transaction"""
    return AppointmentService.reschedule_appointment(
        db,
        owner,
        appointment_id,
        new_start=payload.start,
        service_id=payload.service_id,
        duration_min=payload.duration_min,
        idempotency_key=payload.idempotency_key,
    )
