import random
from datetime import timedelta

import pytest

from app.core.exceptions import InvalidInput, NotFound
from app.services.scheduling.conflict_detector import has_capacity
from app.services.scheduling.slot_generator import candidate_starts, generate_slots
from tests.helpers import MONDAY, OTHER_OWNER, OWNER, iso_slots, monday_window, utc


def only_slots(result):
    assert len(result) == 1
    return result[0].slots


class TestCandidateStarts:
    def test_last_start_still_fits(self):
        assert candidate_starts(480, 540, 30, 15) == [480, 495, 510]

    def test_window_shorter_than_duration(self):
        assert candidate_starts(480, 500, 30, 15) == []

    def test_step_larger_than_duration(self):
        assert candidate_starts(480, 600, 15, 60) == [480, 540]


class TestGenerateSlots:
    def test_plain_window(self, db, make_professional, assign_template):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12)])

        result = generate_slots(db, OWNER, "2025-10-20", duration_min=30)

        assert result[0].professional_id == str(pro.id)
        assert result[0].professional_name == "Ana"
        assert only_slots(result) == iso_slots(utc(2025, 10, 20, 6, 0), utc(2025, 10, 20, 9, 30))

    def test_time_off_splits_the_window(self, db, make_professional, assign_template, make_time_off):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12)])
        make_time_off(MONDAY, start_min=9 * 60, end_min=10 * 60)

        slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))

        assert slots == (
            iso_slots(utc(2025, 10, 20, 6, 0), utc(2025, 10, 20, 6, 30))
            + iso_slots(utc(2025, 10, 20, 8, 0), utc(2025, 10, 20, 9, 30))
        )

    def test_existing_appointment_with_buffer(self, db, make_professional, assign_template, book):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12)])
        # 10:00-10:30 local with 15 minutes of cleanup afterwards
        book(pro, utc(2025, 10, 20, 8, 0), duration_min=30, buffer_after_min=15)

        slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))

        assert "2025-10-20T07:30:00.000Z" in slots
        for blocked in ("07:45", "08:00", "08:15", "08:30"):
            assert f"2025-10-20T{blocked}:00.000Z" not in slots
        assert "2025-10-20T08:45:00.000Z" in slots

    def test_cancelled_appointments_do_not_block(self, db, make_professional, assign_template, book):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12)])
        book(pro, utc(2025, 10, 20, 8, 0), status="cancelled")

        assert len(only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))) == 15

    def test_service_buffers_apply_to_candidates(self, db, make_professional, make_service,
                                                 assign_template, book):
        pro = make_professional()
        service = make_service(duration_min=30, buffer_before_min=10)
        assign_template(pro, [monday_window(8, 12)])
        book(pro, utc(2025, 10, 20, 8, 0))

        slots = only_slots(generate_slots(db, OWNER, MONDAY, service_id=service.id))

        # 10:30 local would need 10:20-11:00, touching the booking that ends 10:30
        assert "2025-10-20T08:30:00.000Z" not in slots
        assert "2025-10-20T08:45:00.000Z" in slots
        assert "2025-10-20T07:30:00.000Z" in slots

    def test_capacity_allows_parallel_bookings(self, db, make_professional, assign_template, book):
        pro = make_professional(capacity=2)
        assign_template(pro, [monday_window(8, 12)])
        book(pro, utc(2025, 10, 20, 8, 0))

        slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))
        assert "2025-10-20T08:00:00.000Z" in slots

        book(pro, utc(2025, 10, 20, 8, 0))
        slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))
        assert "2025-10-20T08:00:00.000Z" not in slots

    def test_identical_calls_return_identical_results(self, db, make_professional, assign_template, book):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12), monday_window(15, 19)])
        book(pro, utc(2025, 10, 20, 9, 0))

        first = generate_slots(db, OWNER, MONDAY, duration_min=45, step_min=10)
        second = generate_slots(db, OWNER, MONDAY, duration_min=45, step_min=10)
        assert first == second

    def test_overlapping_templates_do_not_duplicate_slots(self, db, make_professional, assign_template):
        pro = make_professional()
        assign_template(pro, [monday_window(8, 12)], timezone_name="Europe/Madrid")
        # same instants expressed in UTC
        assign_template(pro, [monday_window(6, 10)], timezone_name="UTC")

        slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=30))

        assert slots == sorted(set(slots))
        assert len(slots) == 15

    def test_professional_without_slots_is_listed(self, db, make_professional, assign_template):
        busy = make_professional(name="Ana")
        make_professional(name="Bea")
        assign_template(busy, [monday_window(8, 9)])

        result = generate_slots(db, OWNER, MONDAY, duration_min=30)

        assert [(r.professional_name, len(r.slots)) for r in result] == [("Ana", 3), ("Bea", 0)]

    def test_inactive_and_other_owner_professionals_excluded(self, db, make_professional, assign_template):
        make_professional(name="Ana")
        make_professional(name="Bea", active=False)
        make_professional(name="Cai", owner=OTHER_OWNER)

        names = [r.professional_name for r in generate_slots(db, OWNER, MONDAY, duration_min=30)]
        assert names == ["Ana"]

    def test_required_skills_filter_professionals(self, db, make_professional, make_service):
        make_professional(name="Ana", skills=["laser", "peel"])
        make_professional(name="Bea", skills=["peel"])
        service = make_service(required_skills=["laser"])

        names = [r.professional_name for r in generate_slots(db, OWNER, MONDAY, service_id=service.id)]
        assert names == ["Ana"]

    def test_single_professional_filter(self, db, make_professional):
        make_professional(name="Ana")
        bea = make_professional(name="Bea")

        result = generate_slots(db, OWNER, MONDAY, professional_id=str(bea.id), duration_min=30)
        assert [r.professional_name for r in result] == ["Bea"]

    def test_dst_day_uses_wall_clock(self, db, make_professional, assign_template):
        pro = make_professional()
        # Sunday 2025-03-30, clocks jump 02:00 -> 03:00 in Madrid
        assign_template(pro, [{"day_of_week": 0, "start_min": 600, "end_min": 660}])

        slots = only_slots(generate_slots(db, OWNER, "2025-03-30", duration_min=30))
        assert slots == iso_slots(utc(2025, 3, 30, 8, 0), utc(2025, 3, 30, 8, 30))

    def test_repeated_hour_on_fall_back_day_yields_both_instants(self, db, make_professional, assign_template):
        pro = make_professional()
        # Sunday 2025-10-26, clocks go back 03:00 -> 02:00 in Madrid
        assign_template(pro, [{"day_of_week": 0, "start_min": 60, "end_min": 240}])

        slots = only_slots(generate_slots(db, OWNER, "2025-10-26", duration_min=60, step_min=60))
        assert slots == [
            "2025-10-25T23:00:00.000Z",
            "2025-10-26T00:00:00.000Z",
            "2025-10-26T01:00:00.000Z",
            "2025-10-26T02:00:00.000Z",
        ]

    @pytest.mark.parametrize("kwargs", [
        {},
        {"duration_min": 4},
        {"duration_min": 30, "step_min": 0},
    ])
    def test_invalid_input(self, db, kwargs):
        with pytest.raises(InvalidInput):
            generate_slots(db, OWNER, MONDAY, **kwargs)

    def test_service_and_duration_together_rejected(self, db, make_service):
        service = make_service()
        with pytest.raises(InvalidInput):
            generate_slots(db, OWNER, MONDAY, service_id=service.id, duration_min=30)

    def test_invalid_date(self, db):
        with pytest.raises(InvalidInput):
            generate_slots(db, OWNER, "20/10/2025", duration_min=30)

    def test_unknown_service(self, db, make_service):
        service = make_service(owner=OTHER_OWNER)
        with pytest.raises(NotFound):
            generate_slots(db, OWNER, MONDAY, service_id=service.id)


@pytest.mark.parametrize("seed", range(8))
def test_every_returned_slot_has_capacity(db, make_professional, assign_template, book, seed):
    rng = random.Random(seed)
    pro = make_professional(capacity=rng.randint(1, 3))
    assign_template(pro, [monday_window(7, 13), monday_window(14, 20)])

    existing = []
    for _ in range(rng.randint(0, 12)):
        start = utc(2025, 10, 20, 5, 0) + timedelta(minutes=5 * rng.randint(0, 150))
        existing.append(book(
            pro,
            start,
            duration_min=rng.choice([15, 30, 45, 60]),
            buffer_before_min=rng.choice([0, 5, 10]),
            buffer_after_min=rng.choice([0, 15]),
            status=rng.choice(["confirmed", "confirmed", "pending", "cancelled"]),
        ))

    duration = rng.choice([20, 30, 60])
    slots = only_slots(generate_slots(db, OWNER, MONDAY, duration_min=duration))

    for slot in slots:
        start = utc(2025, 10, 20, int(slot[11:13]), int(slot[14:16]))
        assert has_capacity(existing, start, start + timedelta(minutes=duration), 0, 0, pro.capacity)
