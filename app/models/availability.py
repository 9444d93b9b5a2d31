# app/models/availability.py
from sqlalchemy import Column, String, Integer, Date, DateTime, JSON, Uuid, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func
import uuid

from app.core.exceptions import InvalidInput
from app.models.base import Base


class AvailabilityTemplate(Base):
    """Reusable weekly availability, expressed in the template's own timezone"""
    __tablename__ = "availability_templates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    timezone = Column(String(64), nullable=False)  # IANA, e.g. "Europe/Madrid"

    # [{"day_of_week": 0..6 (0=Sunday), "start_min": 480, "end_min": 720}, ...]
    windows = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("windows")
    def _validate_windows(self, key, value):
        from app.schemas.scheduling import AvailabilityWindow

        return [AvailabilityWindow.model_validate(w).model_dump() for w in (value or [])]

    def windows_for_weekday(self, weekday: int):
        """Windows (start_min, end_min) recurring on the given 0=Sunday weekday"""
        return [
            (w["start_min"], w["end_min"])
            for w in (self.windows or [])
            if w["day_of_week"] == weekday
        ]

    def __repr__(self):
        return f"<AvailabilityTemplate(id={self.id}, name={self.name}, timezone={self.timezone})>"


class Assignment(Base):
    """Binds a professional to a template for an inclusive date range"""
    __tablename__ = "assignments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)

    professional_id = Column(Uuid(as_uuid=True), ForeignKey("professionals.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    template_id = Column(Uuid(as_uuid=True), ForeignKey("availability_templates.id", ondelete="CASCADE"),
                         nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # None = open-ended

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    template = relationship("AvailabilityTemplate")
    professional = relationship("Professional")

    @staticmethod
    def validate_ownership(professional, template):
        """A professional may only be assigned templates of the same owner"""
        if professional.owner != template.owner:
            raise InvalidInput("Template and professional belong to different owners")

    def covers(self, day) -> bool:
        return self.start_date <= day and (self.end_date is None or self.end_date >= day)


class TimeOff(Base):
    """
    Exception removing availability on one local calendar date.
    No professional = whole-business closure; no minute range = whole day.
    """
    __tablename__ = "time_off"
    __table_args__ = (
        CheckConstraint(
            "start_min IS NULL OR end_min IS NULL OR start_min < end_min",
            name="ck_time_off_range",
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)
    professional_id = Column(Uuid(as_uuid=True), ForeignKey("professionals.id", ondelete="CASCADE"),
                             nullable=True, index=True)

    date = Column(Date, nullable=False, index=True)
    start_min = Column(Integer, nullable=True)
    end_min = Column(Integer, nullable=True)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def minute_range(self):
        """(start_min, end_min) covered on the local day"""
        start = self.start_min if self.start_min is not None else 0
        end = self.end_min if self.end_min is not None else 24 * 60
        return start, end
