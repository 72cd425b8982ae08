from datetime import date, datetime, timezone

from BackEnd.core.clock import (
    fmt_compact,
    fmt_duration_short,
    fmt_hms,
    local_day,
    local_midnight,
    month_days,
    year_bounds,
)


def test_fmt_hms_always_has_hours() -> None:
    assert fmt_hms(0) == "00:00:00"
    assert fmt_hms(59) == "00:00:59"
    assert fmt_hms(3661) == "01:01:01"
    assert fmt_hms(-5) == "00:00:00"


def test_fmt_compact_drops_zero_hours() -> None:
    assert fmt_compact(59) == "00:59"
    assert fmt_compact(61.9) == "01:01"
    assert fmt_compact(3600) == "01:00:00"


def test_fmt_duration_short() -> None:
    assert fmt_duration_short(45 * 60) == "45m"
    assert fmt_duration_short(5400) == "1h 30m"


def test_month_days_has_no_padding() -> None:
    feb = month_days(date(2028, 2, 17))
    assert feb[0] == date(2028, 2, 1)
    assert feb[-1] == date(2028, 2, 29)
    assert len(month_days(date(2026, 4, 1))) == 30


def test_year_bounds() -> None:
    assert year_bounds(date(2026, 7, 4)) == (date(2026, 1, 1), date(2026, 12, 31))


def test_local_day_of_local_midnight_is_that_day() -> None:
    midnight = local_midnight(date(2026, 5, 3))
    assert local_day(midnight) == date(2026, 5, 3)
    assert local_day(midnight.astimezone(timezone.utc)) == date(2026, 5, 3)
    assert local_day(datetime(2026, 5, 3, 23, 0)) == date(2026, 5, 3)
