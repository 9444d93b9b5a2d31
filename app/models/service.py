# app/models/service.py
"""
Service Model - what a client books.
Duration and buffers define the effective occupied range of an appointment.
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, JSON, Uuid, CheckConstraint
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Service(Base):
    """
    Buffers are preparation/cleanup time around the booked range. They are
    not bookable by anyone else and must not overlap other bookings of the
    same professional.
    """
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_min >= 5", name="ck_services_duration"),
        CheckConstraint("buffer_before_min >= 0", name="ck_services_buffer_before"),
        CheckConstraint("buffer_after_min >= 0", name="ck_services_buffer_after"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    duration_min = Column(Integer, nullable=False)
    buffer_before_min = Column(Integer, default=0, nullable=False)
    buffer_after_min = Column(Integer, default=0, nullable=False)
    required_skills = Column(JSON, default=list)

    active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, owner={self.owner})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "owner": self.owner,
            "name": self.name,
            "description": self.description,
            "duration_min": self.duration_min,
            "buffer_before_min": self.buffer_before_min,
            "buffer_after_min": self.buffer_after_min,
            "required_skills": list(self.required_skills or []),
            "active": self.active,
        }

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        hours = self.duration_min // 60
        minutes = self.duration_min % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
