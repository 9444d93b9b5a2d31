from datetime import date

from app.services.scheduling.availability_resolver import resolve
from tests.helpers import MONDAY, OTHER_OWNER, OWNER, monday_window


def spans(windows):
    return [(w.start_min, w.end_min) for w in windows]


def test_no_assignment_means_no_availability(db, make_professional):
    pro = make_professional()
    assert resolve(db, OWNER, pro.id, MONDAY) == []


def test_template_windows_for_weekday(db, make_professional, assign_template):
    pro = make_professional()
    template = assign_template(pro, [
        monday_window(8, 12),
        monday_window(15, 19),
        {"day_of_week": 2, "start_min": 600, "end_min": 660},
    ])

    windows = resolve(db, OWNER, pro.id, MONDAY)
    assert spans(windows) == [(480, 720), (900, 1140)]
    assert {w.timezone for w in windows} == {"Europe/Madrid"}
    assert {w.template_id for w in windows} == {template.id}


def test_other_weekday_is_empty(db, make_professional, assign_template):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)])
    assert resolve(db, OWNER, pro.id, "2025-10-21") == []


def test_assignment_range_is_inclusive(db, make_professional, assign_template):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)], start_date=MONDAY, end_date=MONDAY)

    assert spans(resolve(db, OWNER, pro.id, MONDAY)) == [(480, 720)]
    assert resolve(db, OWNER, pro.id, "2025-10-13") == []
    assert resolve(db, OWNER, pro.id, "2025-10-27") == []


def test_business_wide_time_off(db, make_professional, assign_template, make_time_off):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)])
    make_time_off(MONDAY, start_min=9 * 60, end_min=10 * 60)

    assert spans(resolve(db, OWNER, pro.id, MONDAY)) == [(480, 540), (600, 720)]


def test_time_off_of_another_professional_is_ignored(db, make_professional, assign_template, make_time_off):
    pro = make_professional(name="Ana")
    other = make_professional(name="Bea")
    assign_template(pro, [monday_window(8, 12)])
    make_time_off(MONDAY, professional=other, start_min=9 * 60, end_min=10 * 60)

    assert spans(resolve(db, OWNER, pro.id, MONDAY)) == [(480, 720)]


def test_whole_day_time_off(db, make_professional, assign_template, make_time_off):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12), monday_window(15, 19)])
    make_time_off(MONDAY, professional=pro, reason="Vacation")

    assert resolve(db, OWNER, pro.id, MONDAY) == []


def test_time_off_on_another_date_is_ignored(db, make_professional, assign_template, make_time_off):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)])
    make_time_off(date(2025, 10, 21))

    assert spans(resolve(db, OWNER, pro.id, MONDAY)) == [(480, 720)]


def test_other_owner_time_off_is_ignored(db, make_professional, assign_template, make_time_off):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)])
    make_time_off(MONDAY, owner=OTHER_OWNER)

    assert spans(resolve(db, OWNER, pro.id, MONDAY)) == [(480, 720)]


def test_other_owner_template_is_ignored(db, make_professional, assign_template):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 12)], owner=OTHER_OWNER)

    assert resolve(db, OWNER, pro.id, MONDAY) == []


def test_each_template_keeps_its_timezone(db, make_professional, assign_template):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 10)], timezone_name="Europe/Madrid")
    assign_template(pro, [monday_window(14, 16)], timezone_name="America/New_York")

    windows = resolve(db, OWNER, pro.id, MONDAY)
    assert sorted((w.timezone, w.start_min) for w in windows) == [
        ("America/New_York", 840),
        ("Europe/Madrid", 480),
    ]


def test_invalid_template_timezone_falls_back_to_utc(db, make_professional, assign_template):
    pro = make_professional()
    assign_template(pro, [monday_window(8, 10)], timezone_name="Nowhere/Special")

    windows = resolve(db, OWNER, pro.id, MONDAY)
    assert [w.timezone for w in windows] == ["UTC"]
