# app/models/appointment.py
from datetime import timedelta

from sqlalchemy import Column, String, Integer, Text, DateTime, Uuid, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
import uuid

from app.models.base import Base

ACTIVE_STATUSES = ("confirmed", "pending")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("owner", "idempotency_key", name="uq_appointments_owner_idempotency_key"),
        Index("ix_appointments_owner_professional_start", "owner", "professional_id", "start"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)

    # Client info
    client_id = Column(String, nullable=False)
    client_name = Column(String, nullable=False)

    # References
    professional_id = Column(Uuid(as_uuid=True), ForeignKey("professionals.id"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=True)

    # Appointment details
    start = Column(DateTime(timezone=True), nullable=False)
    duration_min = Column(Integer, nullable=False)

    # Buffers in force when booked, so later service edits never move old bookings
    buffer_before_min = Column(Integer, default=0, nullable=False)
    buffer_after_min = Column(Integer, default=0, nullable=False)

    # Status tracking
    status = Column(String, default="confirmed", nullable=False)  # confirmed, pending, cancelled
    created_by = Column(String, default="human", nullable=False)  # bot, human
    idempotency_key = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    @property
    def end(self):
        return self.start + timedelta(minutes=self.duration_min)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def __repr__(self):
        return f"<Appointment(id={self.id}, start={self.start}, status={self.status})>"
