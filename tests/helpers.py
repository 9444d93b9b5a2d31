"""Constants and small builders shared by the test modules."""
from datetime import date, datetime, timedelta, timezone

OWNER = "clinic-a"
OTHER_OWNER = "clinic-b"

# Monday; Europe/Madrid is on CEST (UTC+2) that day
MONDAY = date(2025, 10, 20)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def monday_window(start_hour, end_hour):
    """A Monday (day_of_week=1) window between two local hours"""
    return {"day_of_week": 1, "start_min": start_hour * 60, "end_min": end_hour * 60}


def iso_slots(first, last, step=timedelta(minutes=15)):
    """Slot strings from `first` to `last` inclusive"""
    out = []
    current = first
    while current <= last:
        out.append(current.strftime("%Y-%m-%dT%H:%M:%S.000Z"))
        current += step
    return out
