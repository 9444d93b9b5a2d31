"""Two clients racing for the last place of a professional."""
import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config.database import _engine_options
from app.core.exceptions import ScheduleConflict
from app.models import Appointment, Base, Professional
from app.schemas.scheduling import AppointmentCreateRequest
from app.services.appointment.appointment_service import AppointmentService
from tests.helpers import OWNER, utc


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over a file database, one connection per session"""
    url = f"sqlite:///{tmp_path / 'booking.db'}"
    engine = create_engine(url, **_engine_options(url))
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


def test_concurrent_requests_for_last_place(file_sessions):
    with file_sessions() as setup:
        professional = Professional(owner=OWNER, name="Ana", skills=[], active=True, capacity=1)
        setup.add(professional)
        setup.commit()
        professional_id = professional.id

    barrier = threading.Barrier(2)
    results = []

    def place_booking(client_id):
        request = AppointmentCreateRequest(
            client_id=client_id,
            client_name=client_id,
            start=utc(2025, 10, 20, 8, 0),
            professional_id=professional_id,
            duration_min=30,
        )
        db = file_sessions()
        try:
            barrier.wait()
            AppointmentService.create_appointment(db, OWNER, request)
            results.append("ok")
        except ScheduleConflict:
            results.append("conflict")
        finally:
            db.close()

    threads = [threading.Thread(target=place_booking, args=(f"client-{i}",)) for i in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sorted(results) == ["conflict", "ok"]

    with file_sessions() as check:
        assert check.query(Appointment).filter(Appointment.status == "confirmed").count() == 1
