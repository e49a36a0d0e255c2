from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from venue_portal.domain.semester import semester_window

IST = ZoneInfo("Asia/Kolkata")


def test_first_half_of_year():
    start, end = semester_window(date(2026, 3, 15))
    assert start == datetime(2026, 1, 1, tzinfo=UTC)
    assert end == datetime.combine(date(2026, 6, 30), time.max, tzinfo=UTC)


def test_second_half_of_year():
    start, end = semester_window(date(2026, 10, 19))
    assert start == datetime(2026, 7, 1, tzinfo=UTC)
    assert end.date() == date(2026, 12, 31)
    assert end.time() == time(23, 59, 59, 999999)


def test_boundary_days_are_inclusive():
    assert semester_window(date(2026, 6, 30))[0].month == 1
    assert semester_window(date(2026, 7, 1))[0].month == 7
    assert semester_window(date(2026, 1, 1))[0] == datetime(2026, 1, 1, tzinfo=UTC)
    assert semester_window(date(2026, 12, 31))[0] == datetime(2026, 7, 1, tzinfo=UTC)


def test_aware_datetime_is_located_in_local_timezone():
    # 20:00 UTC on Jun 30 is already Jul 1 in India
    moment = datetime(2026, 6, 30, 20, 0, tzinfo=UTC)
    assert semester_window(moment)[0].month == 1
    start, _ = semester_window(moment, IST)
    assert start == datetime(2026, 7, 1, tzinfo=IST)


def test_naive_datetime_is_taken_as_local():
    start, end = semester_window(datetime(2026, 2, 1, 23, 30), IST)
    assert start.tzinfo is IST
    assert end == datetime.combine(date(2026, 6, 30), time.max, tzinfo=IST)
