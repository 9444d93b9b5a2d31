"""Shared test fixtures."""
import os

# Must be set before app.config.settings is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BOOKING_LOCK_BACKEND"] = "database"

from datetime import date

import pytest

from app.config.database import SessionLocal, engine
from app.models import (
    Appointment,
    Assignment,
    AvailabilityTemplate,
    Base,
    Professional,
    Service,
    TimeOff,
)
from tests.helpers import OWNER


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_professional(db):
    def _create(owner=OWNER, name="Ana", skills=None, active=True, capacity=1):
        professional = Professional(
            owner=owner, name=name, skills=skills or [], active=active, capacity=capacity
        )
        db.add(professional)
        db.commit()
        return professional
    return _create


@pytest.fixture
def make_service(db):
    def _create(owner=OWNER, name="Consultation", duration_min=30,
                buffer_before_min=0, buffer_after_min=0, required_skills=None, active=True):
        service = Service(
            owner=owner,
            name=name,
            duration_min=duration_min,
            buffer_before_min=buffer_before_min,
            buffer_after_min=buffer_after_min,
            required_skills=required_skills or [],
            active=active,
        )
        db.add(service)
        db.commit()
        return service
    return _create


@pytest.fixture
def assign_template(db):
    """Create a template with the given windows and assign it to a professional."""
    def _create(professional, windows, timezone_name="Europe/Madrid",
                start_date=date(2025, 1, 1), end_date=None, owner=None):
        template = AvailabilityTemplate(
            owner=owner or professional.owner,
            name=f"tpl-{timezone_name}-{len(windows)}-{start_date}",
            timezone=timezone_name,
            windows=windows,
        )
        db.add(template)
        db.flush()
        db.add(Assignment(
            owner=professional.owner,
            professional_id=professional.id,
            template_id=template.id,
            start_date=start_date,
            end_date=end_date,
        ))
        db.commit()
        return template
    return _create


@pytest.fixture
def make_time_off(db):
    def _create(day, professional=None, start_min=None, end_min=None, owner=OWNER, reason=None):
        time_off = TimeOff(
            owner=owner,
            professional_id=professional.id if professional else None,
            date=day,
            start_min=start_min,
            end_min=end_min,
            reason=reason,
        )
        db.add(time_off)
        db.commit()
        return time_off
    return _create


@pytest.fixture
def book(db):
    """Insert an appointment directly, bypassing the validator."""
    def _create(professional, start, duration_min=30, buffer_before_min=0,
                buffer_after_min=0, status="confirmed", owner=None):
        appointment = Appointment(
            owner=owner or professional.owner,
            client_id="c-1",
            client_name="Client",
            professional_id=professional.id,
            start=start,
            duration_min=duration_min,
            buffer_before_min=buffer_before_min,
            buffer_after_min=buffer_after_min,
            status=status,
            created_by="human",
        )
        db.add(appointment)
        db.commit()
        return appointment
    return _create


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    from app.api.dependencies import create_access_token

    token = create_access_token({"sub": OWNER})
    return {"Authorization": f"Bearer {token}"}
