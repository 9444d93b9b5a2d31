# app/models/professional.py
"""
Professional Model - people (or rooms) that can be booked.
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Uuid, CheckConstraint
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Professional(Base):
    __tablename__ = "professionals"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_professionals_capacity"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(100), nullable=False, index=True)  # tenant

    name = Column(String(200), nullable=False)
    skills = Column(JSON, default=list)  # skill tags matched against Service.required_skills
    active = Column(Boolean, default=True, nullable=False)  # bookable or not
    capacity = Column(Integer, default=1, nullable=False)  # simultaneous bookings

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Professional(id={self.id}, name={self.name}, owner={self.owner})>"

    def has_skills(self, required) -> bool:
        """True if every required skill tag is present"""
        return set(required or []).issubset(set(self.skills or []))

    def to_dict(self):
        return {
            "id": str(self.id),
            "owner": self.owner,
            "name": self.name,
            "skills": list(self.skills or []),
            "active": self.active,
            "capacity": self.capacity,
        }
