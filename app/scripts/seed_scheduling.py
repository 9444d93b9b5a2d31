# ===== app/scripts/seed_scheduling.py =====
"""Seed a demo tenant: one professional, one service, a weekly template and a closure"""
from datetime import date

from app.config.database import SessionLocal, create_tables
from app.api.dependencies import create_access_token
from app.models import Assignment, AvailabilityTemplate, Professional, Service, TimeOff
from app.utils.my_logging import setup_logging

OWNER = "demo-clinic"


def seed_scheduling(owner: str = OWNER):
    db = SessionLocal()

    try:
        professional = Professional(owner=owner, name="Ana Lopez", skills=["massage"], capacity=1)
        service = Service(
            owner=owner,
            name="Massage 30'",
            duration_min=30,
            buffer_before_min=0,
            buffer_after_min=15,
            required_skills=["massage"],
        )

        # 1. Mon-Fri 09:00-13:00 and 15:00-19:00 (0=Sunday ... 6=Saturday)
        windows = []
        for day in range(1, 6):
            windows.append({"day_of_week": day, "start_min": 9 * 60, "end_min": 13 * 60})
            windows.append({"day_of_week": day, "start_min": 15 * 60, "end_min": 19 * 60})
        template = AvailabilityTemplate(
            owner=owner, name="Weekdays", timezone="Europe/Madrid", windows=windows
        )

        db.add_all([professional, service, template])
        db.flush()

        Assignment.validate_ownership(professional, template)
        assignment = Assignment(
            owner=owner,
            professional_id=professional.id,
            template_id=template.id,
            start_date=date.today(),
        )

        # 2. Example closure: whole business closed on Christmas
        closure = TimeOff(owner=owner, date=date(date.today().year, 12, 25), reason="Holiday")

        db.add_all([assignment, closure])
        db.commit()

        print("✅ Scheduling data seeded successfully!")
        print(f"   professional: {professional.id}")
        print(f"   service:      {service.id}")
        print(f"   token:        {create_access_token({'sub': owner})}")

    except Exception as e:
        db.rollback()
        print("❌ Error seeding scheduling data:", e)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    create_tables()
    seed_scheduling()
