"""
Overlap Detection

Decides whether a candidate booking still fits a professional's capacity,
considering:
- the candidate's service buffers
- each existing appointment's own stored buffers
- appointment status (cancelled ones never count)
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List

from app.models.appointment import ACTIVE_STATUSES
from app.services.scheduling.timezone_calendar import ensure_utc


@dataclass(frozen=True)
class TimeRange:
    """Half-open range of UTC instants"""
    start: datetime
    end: datetime

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass
class CapacityCheck:
    capacity: int
    overlapping: List = field(default_factory=list)

    @property
    def capacity_used(self) -> int:
        return len(self.overlapping)

    @property
    def capacity_available(self) -> int:
        return max(0, self.capacity - self.capacity_used)

    @property
    def has_capacity(self) -> bool:
        return self.capacity_used < self.capacity


def effective_range(start: datetime, end: datetime, buffer_before: int = 0, buffer_after: int = 0) -> TimeRange:
    """Occupied range of a booking: [start - buffer_before, end + buffer_after)"""
    return TimeRange(
        start=ensure_utc(start) - timedelta(minutes=buffer_before or 0),
        end=ensure_utc(end) + timedelta(minutes=buffer_after or 0),
    )


def appointment_effective_range(appointment) -> TimeRange:
    """Effective range of a stored appointment using the buffers it was booked with"""
    start = ensure_utc(appointment.start)
    return effective_range(
        start,
        start + timedelta(minutes=appointment.duration_min),
        appointment.buffer_before_min,
        appointment.buffer_after_min,
    )


def check_capacity(
        existing: Iterable,
        candidate_start: datetime,
        candidate_end: datetime,
        buffer_before: int,
        buffer_after: int,
        capacity: int
) -> CapacityCheck:
    """
    Count existing appointments whose effective range overlaps the
    candidate's effective range.

    Args:
        existing: appointments of the same professional (any status)
        candidate_start, candidate_end: booked range of the candidate
        buffer_before, buffer_after: buffers of the candidate's service
        capacity: simultaneous bookings the professional can hold

    Returns:
        CapacityCheck with the overlapping appointments
    """
    candidate = effective_range(candidate_start, candidate_end, buffer_before, buffer_after)
    overlapping = [
        appt for appt in existing
        if appt.status in ACTIVE_STATUSES and appointment_effective_range(appt).overlaps(candidate)
    ]
    return CapacityCheck(capacity=max(1, capacity or 1), overlapping=overlapping)


def has_capacity(
        existing: Iterable,
        candidate_start: datetime,
        candidate_end: datetime,
        buffer_before: int,
        buffer_after: int,
        capacity: int
) -> bool:
    """True iff fewer than `capacity` existing effective ranges overlap the candidate's"""
    return check_capacity(
        existing, candidate_start, candidate_end, buffer_before, buffer_after, capacity
    ).has_capacity
