# ============================================================================
# app/api/v1/booking/slots.py
# Slot listing - read only, safe to retry
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import get_current_owner
from app.schemas.scheduling import ProfessionalSlots
from app.services.scheduling.slot_generator import generate_slots

router = APIRouter(tags=["booking-slots"])


@router.get("/slots", response_model=List[ProfessionalSlots])
def list_slots(
        slot_date: date = Query(..., alias="date", description="Local calendar date (YYYY-MM-DD)"),
        service_id: Optional[UUID] = Query(None, alias="serviceId"),
        duration_min: Optional[int] = Query(None, alias="durationMin", description="Used only without serviceId"),
        professional_id: Optional[UUID] = Query(None, alias="professionalId"),
        step_min: Optional[int] = Query(None, alias="stepMin", description="Grid step in minutes (default 15)"),
        owner: str = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """
    Bookable UTC start instants per eligible professional for one date.
    Professionals with no free slot are listed with an empty `slots` array.
    """
    return generate_slots(
        db,
        owner,
        slot_date,
        professional_id=professional_id,
        service_id=service_id,
        duration_min=duration_min,
        step_min=step_min,
    )
