"""Semester window calculation.

Semesters are fixed half-year buckets:
- first half: Jan 1 00:00 to Jun 30 23:59:59.999999
- second half: Jul 1 00:00 to Dec 31 23:59:59.999999
"""

from datetime import UTC, date, datetime, time, tzinfo


def semester_window(day: date | datetime, tz: tzinfo = UTC) -> tuple[datetime, datetime]:
    """Return the inclusive (start, end) of the semester containing ``day``.

    Args:
        day: Date or datetime to locate. Aware datetimes are converted to ``tz``
            first, naive ones are taken as already local.
        tz: Timezone the semester boundaries are expressed in

    Returns:
        tuple[datetime, datetime]: Timezone-aware semester bounds
    """
    if isinstance(day, datetime):
        if day.tzinfo is not None:
            day = day.astimezone(tz)
        day = day.date()

    if day.month <= 6:
        start = date(day.year, 1, 1)
        end = date(day.year, 6, 30)
    else:
        start = date(day.year, 7, 1)
        end = date(day.year, 12, 31)

    return (
        datetime.combine(start, time.min, tzinfo=tz),
        datetime.combine(end, time.max, tzinfo=tz),
    )
