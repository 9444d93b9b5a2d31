"""
Pydantic schemas for availability windows, slot listings and bookings.
Boundary payloads use camelCase names; timestamps are ISO-8601 UTC.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime, timezone
from uuid import UUID

MINUTES_PER_DAY = 24 * 60


# ============================================================================
# Template windows
# ============================================================================

class AvailabilityWindow(BaseModel):
    """A recurring local time-of-day range on one weekday (0=Sunday..6=Saturday)"""
    day_of_week: int = Field(..., ge=0, le=6)
    start_min: int = Field(..., ge=0, le=MINUTES_PER_DAY)
    end_min: int = Field(..., ge=0, le=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def check_range(self):
        if self.start_min >= self.end_min:
            raise ValueError("start_min must be before end_min")
        return self


# ============================================================================
# Request Schemas
# ============================================================================

class AppointmentCreateRequest(BaseModel):
    """Body of POST /appointments"""
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="clientId", min_length=1)
    client_name: str = Field(..., alias="clientName", min_length=1)
    start: datetime
    professional_id: UUID = Field(..., alias="professionalId")
    service_id: Optional[UUID] = Field(None, alias="serviceId")
    duration_min: Optional[int] = Field(None, alias="durationMin")
    created_by: Literal["bot", "human"] = Field("human", alias="createdBy")
    idempotency_key: Optional[str] = Field(None, alias="idempotencyKey", max_length=128)

    @field_validator("start")
    @classmethod
    def require_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("start must be an ISO-8601 instant with an offset, e.g. 2025-10-21T09:00:00Z")
        return v.astimezone(timezone.utc)


class RescheduleRequest(BaseModel):
    """Body of POST /appointments/{id}/reschedule"""
    model_config = ConfigDict(populate_by_name=True)

    start: datetime
    service_id: Optional[UUID] = Field(None, alias="serviceId")
    duration_min: Optional[int] = Field(None, alias="durationMin")
    idempotency_key: Optional[str] = Field(None, alias="idempotencyKey", max_length=128)

    @field_validator("start")
    @classmethod
    def require_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("start must be an ISO-8601 instant with an offset")
        return v.astimezone(timezone.utc)


class CancelRequest(BaseModel):
    reason: Optional[str] = None


# ============================================================================
# Response Schemas
# ============================================================================

class ProfessionalSlots(BaseModel):
    """Bookable UTC instants of one professional for one date"""
    model_config = ConfigDict(populate_by_name=True)

    professional_id: str = Field(..., serialization_alias="professionalId")
    professional_name: str = Field(..., serialization_alias="professionalName")
    slots: List[str] = Field(default_factory=list)


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    owner: str
    client_id: str = Field(..., serialization_alias="clientId")
    client_name: str = Field(..., serialization_alias="clientName")
    professional_id: UUID = Field(..., serialization_alias="professionalId")
    service_id: Optional[UUID] = Field(None, serialization_alias="serviceId")
    start: datetime
    end: datetime
    duration_min: int = Field(..., serialization_alias="durationMin")
    buffer_before_min: int = Field(0, serialization_alias="bufferBeforeMin")
    buffer_after_min: int = Field(0, serialization_alias="bufferAfterMin")
    status: Literal["confirmed", "pending", "cancelled"]
    created_by: Literal["bot", "human"] = Field(..., serialization_alias="createdBy")
    cancelled_at: Optional[datetime] = Field(None, serialization_alias="cancelledAt")

    @field_validator("start", "end", "cancelled_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive values; they are stored as UTC
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
